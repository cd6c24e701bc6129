import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

from django.conf import settings
from django.core import signing

from core.errors import MissingToken, InvalidToken, ExpiredToken
from .models import Role

logger = logging.getLogger(__name__)

SESSION_SALT = "accounts.Session.v1"


@dataclass(frozen=True)
class SessionContext:
    identity_id: int
    role: Role
    issued_at: datetime


def session_ttl_seconds() -> int:
    return int(getattr(settings, "SESSION_TTL_SECONDS", 60 * 60 * 24))


def issue_session(identity_id, role) -> str:
    # TimestampSigner embeds issued-at; expiry is checked via max_age on read
    return signing.dumps({"uid": identity_id, "role": Role(role).value}, salt=SESSION_SALT)


def issue_for(identity) -> str:
    return issue_session(identity.pk, identity.role)


def authenticate(token) -> SessionContext:
    token = (token or "").strip()
    if not token:
        raise MissingToken()

    try:
        claims = signing.loads(token, salt=SESSION_SALT, max_age=session_ttl_seconds())
    except signing.SignatureExpired:
        raise ExpiredToken(detail="Please log in again to get a new token")
    except signing.BadSignature:
        raise InvalidToken(detail="Token signature verification failed")

    if not isinstance(claims, dict) or not claims.get("uid") or not claims.get("role"):
        raise InvalidToken(detail="Token is missing required fields")
    try:
        role = Role(claims["role"])
    except ValueError:
        raise InvalidToken(detail="Token carries an unknown role")

    return SessionContext(
        identity_id=claims["uid"],
        role=role,
        issued_at=_issued_at(token),
    )


def _issued_at(token) -> datetime:
    # payload:timestamp:signature
    stamp = token.rsplit(":", 2)[-2]
    return datetime.fromtimestamp(signing.b62_decode(stamp), tz=dt_timezone.utc)


def bearer_token(request):
    header = request.headers.get("Authorization", "")
    if not header:
        return None
    if header.startswith("Bearer "):
        return header[len("Bearer "):]
    return header
