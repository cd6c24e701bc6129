import logging
from functools import wraps

from core.errors import Forbidden
from .identity import get_identity
from .tokens import authenticate, bearer_token

logger = logging.getLogger(__name__)


def authorize_role(context, *roles):
    if roles and context.role not in roles:
        logger.warning(
            "Role %s (id=%s) denied; requires %s",
            context.role.value, context.identity_id, ", ".join(r.value for r in roles),
        )
        raise Forbidden(detail="This action requires the %s role" % " or ".join(r.value for r in roles))
    return context


def session_required(*roles):
    """
    Resolve the bearer token on the request and enforce the allowed roles.

    Sets ``request.session_context`` and ``request.identity`` (the loaded account).
    Must sit inside ``core.api.api_view`` so raised errors become JSON.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            context = authenticate(bearer_token(request))
            authorize_role(context, *roles)

            request.session_context = context
            request.identity = get_identity(context.role, context.identity_id)
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
