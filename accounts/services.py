import logging

from django.db import transaction

from core.errors import InvalidCredentials, NotVerified, ValidationFailed
from core.history import record
from .identity import find_by_email, mask_email
from .models import AdminAccount, Role
from .tokens import issue_for

logger = logging.getLogger(__name__)


def login(role, email, password):
    """Password login for any role. Returns (identity, session_token)."""
    role = Role(role)
    identity = find_by_email(role, email)
    if identity is None or not identity.check_password(password):
        logger.info("Failed %s login for %s", role.value, mask_email((email or "").strip().lower()))
        raise InvalidCredentials()

    if role == Role.HOSPITAL and not identity.is_verified:
        raise NotVerified("Your account is pending admin verification. Please wait for approval.")

    identity.touch_login()
    record(identity, "login", email=identity.email)
    return identity, issue_for(identity)


@transaction.atomic
def register_first_admin(form):
    """Bootstrap the platform admin. Only allowed while no admin exists."""
    if AdminAccount.objects.exists():
        raise ValidationFailed("Admin already exists")
    admin = form.save()
    record(admin, "register", email=admin.email)
    logger.info("Bootstrapped admin #%s", admin.pk)
    return admin, issue_for(admin)
