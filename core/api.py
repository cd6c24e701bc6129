import json
import logging
import re
from functools import wraps

from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .errors import PlatformError, ValidationFailed

logger = logging.getLogger(__name__)


def api_view(*methods):
    """
    JSON endpoint decorator.

    Restricts HTTP methods, skips CSRF (bearer tokens, no cookies) and turns
    any PlatformError raised by the view into a JSON error response.
    Views may return a dict/list (200) or a (payload, status) tuple.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            try:
                result = view_func(request, *args, **kwargs)
            except PlatformError as e:
                logger.info("%s %s -> %s (%s)", request.method, request.path, e.status_code, e.code)
                return JsonResponse(e.as_dict(), status=e.status_code)

            status = 200
            if isinstance(result, tuple):
                result, status = result
            return JsonResponse(result, status=status, safe=False)

        return csrf_exempt(require_http_methods(list(methods))(_wrapped))
    return decorator


def json_body(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ValidationFailed("Request body must be valid JSON.")
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be a JSON object.")
    return data


_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def snake_keys(data: dict) -> dict:
    """bloodGroup -> blood_group, so SPA payloads bind to form field names."""
    return {_CAMEL_RE.sub("_", k).lower(): v for k, v in (data or {}).items()}


def merged_with_instance(instance, fields, data: dict) -> dict:
    """
    PATCH semantics for model forms: start from the stored values of ``fields``
    and overlay only the keys the client actually sent.
    """
    current = model_to_dict(instance, fields=fields)
    current.update({k: v for k, v in data.items() if k in fields})
    return current


def form_errors(form) -> dict:
    return {field: [str(e) for e in errors] for field, errors in form.errors.items()}


def validated(form):
    """Return cleaned_data or raise ValidationFailed with the form's field errors."""
    if not form.is_valid():
        errors = form_errors(form)
        first = next(iter(errors.values()), ["Invalid input."])[0]
        raise ValidationFailed(first, errors=errors)
    return form.cleaned_data


@api_view("GET")
def health(request):
    return {"message": "RaktSetu backend running"}
