import logging

from django.db import transaction
from django.utils import timezone

from accounts.identity import identity_model
from accounts.models import Role
from accounts.permissions import session_required
from core.api import api_view, json_body, snake_keys, validated
from core.errors import AlreadyResponded, FeedbackNotFound
from .forms import FeedbackForm, FeedbackResponseForm
from .models import Feedback
from .services import send_notice_email

logger = logging.getLogger(__name__)


def _authors(feedbacks):
    """Load the donor/hospital behind each feedback with one query per author kind."""
    ids = {}
    for fb in feedbacks:
        ids.setdefault(fb.user_type, set()).add(fb.user_id)
    authors = {}
    for user_type, pks in ids.items():
        model = identity_model(Feedback.AUTHOR_ROLES[user_type])
        for obj in model.objects.filter(pk__in=pks):
            authors[(user_type, obj.pk)] = obj
    return authors


def _with_authors(feedbacks):
    feedbacks = list(feedbacks)
    authors = _authors(feedbacks)
    return [fb.to_dict(author=authors.get((fb.user_type, fb.user_id))) for fb in feedbacks]


def _own(request):
    identity = request.identity
    return Feedback.objects.filter(user_id=identity.pk, user_type=identity.user_type)


# ---------------- donors & hospitals ----------------
@api_view("POST")
@session_required(Role.DONOR, Role.HOSPITAL)
def submit(request):
    form = FeedbackForm(json_body(request))
    validated(form)
    feedback = form.save(commit=False)
    feedback.user_id = request.identity.pk
    feedback.user_type = request.identity.user_type
    feedback.save()
    logger.info("%s #%s submitted feedback #%s", feedback.user_type, feedback.user_id, feedback.pk)
    return {"message": "Feedback submitted successfully", "feedback": feedback.to_dict()}, 201


@api_view("GET")
@session_required(Role.DONOR, Role.HOSPITAL)
def history(request):
    return [fb.to_dict() for fb in _own(request)]


@api_view("GET")
@session_required(Role.DONOR, Role.HOSPITAL)
def responses(request):
    qs = _own(request).filter(status=Feedback.Status.RESPONDED).order_by("-responded_at")
    return [fb.to_dict() for fb in qs]


# ---------------- admin ----------------
@api_view("GET")
@session_required(Role.ADMIN)
def admin_pending(request):
    return _with_authors(Feedback.objects.filter(status=Feedback.Status.PENDING))


@api_view("GET")
@session_required(Role.ADMIN)
def admin_responded(request):
    qs = Feedback.objects.filter(status=Feedback.Status.RESPONDED).order_by("-responded_at")
    return _with_authors(qs)


@api_view("POST")
@session_required(Role.ADMIN)
def admin_respond(request, feedback_id):
    data = validated(FeedbackResponseForm(snake_keys(json_body(request))))

    with transaction.atomic():
        try:
            feedback = Feedback.objects.select_for_update().get(pk=feedback_id)
        except Feedback.DoesNotExist:
            raise FeedbackNotFound()
        if feedback.status == Feedback.Status.RESPONDED:
            raise AlreadyResponded()

        feedback.status = Feedback.Status.RESPONDED
        feedback.response_text = data["response_text"]
        feedback.responded_by = request.identity
        feedback.responded_at = timezone.now()
        feedback.save()

    logger.info("Admin #%s responded to feedback #%s", request.identity.pk, feedback.pk)
    author = identity_model(feedback.author_role).objects.filter(pk=feedback.user_id).first()
    if author is not None:
        send_notice_email(
            author.email,
            "RaktSetu - Response to your feedback",
            f"Dear {author.name},\n\nAn administrator responded to your feedback:\n\n"
            f"{feedback.response_text}\n\nRaktSetu Team",
        )
    return {"message": "Response submitted successfully", "feedback": feedback.to_dict(author=author)}
