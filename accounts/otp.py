"""
One-time passcodes gating account creation and password reset.

A passcode entry lives in a Django cache (``settings.OTP_CACHE_ALIAS``) under
the target email. A newer request for the same email overwrites the older
entry, so only the latest code is ever valid. Expiry is checked against the
stored instant at verification time; the cache timeout only evicts leftovers.
"""
import hmac
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.core.cache import caches
from django.db import IntegrityError, transaction
from django.utils import timezone

from communication.services import send_code_email
from core.errors import (
    CodeExpired, CodeMismatch, CodeRequestTooSoon, DuplicateIdentity,
    IdentityNotFound, ResetNotVerified, ValidationFailed,
)
from core.history import record
from .identity import identity_model, find_by_email, mask_email
from .models import Role
from .tokens import issue_for

logger = logging.getLogger(__name__)

PURPOSE_REGISTRATION = "registration"
PURPOSE_RESET = "reset"
PURPOSES = (PURPOSE_REGISTRATION, PURPOSE_RESET)

# roles allowed to self-register through a passcode
REGISTRABLE_ROLES = (Role.DONOR, Role.HOSPITAL)


@dataclass
class PasscodeEntry:
    code: str
    purpose: str
    role: str
    issued_at: datetime
    expires_at: datetime
    payload: dict = field(default_factory=dict)
    verified: bool = False


def generate_code() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def normalize_email(email) -> str:
    return (email or "").strip().lower()


class OtpBroker:
    def __init__(self, store=None, deliver=None, ttl_seconds=None,
                 reset_window_seconds=None, resend_interval_seconds=None, clock=None):
        self.store = store if store is not None else caches[getattr(settings, "OTP_CACHE_ALIAS", "default")]
        self.deliver = deliver or send_code_email
        self.ttl = int(ttl_seconds if ttl_seconds is not None else getattr(settings, "OTP_TTL_SECONDS", 60))
        self.reset_window = int(
            reset_window_seconds if reset_window_seconds is not None
            else getattr(settings, "OTP_RESET_WINDOW_SECONDS", 600)
        )
        self.resend_interval = int(
            resend_interval_seconds if resend_interval_seconds is not None
            else getattr(settings, "OTP_RESEND_INTERVAL_SECONDS", 0)
        )
        self.clock = clock or timezone.now

    # ---------------- store ----------------
    def _key(self, email):
        return f"otp:{email}"

    def get_entry(self, email):
        return self.store.get(self._key(normalize_email(email)))

    def _put(self, email, entry, timeout):
        # a few seconds of slack so lazy expiry reports CodeExpired rather than a vanished entry
        self.store.set(self._key(email), entry, timeout=timeout + 5)

    def _drop(self, email):
        self.store.delete(self._key(email))

    # ---------------- request ----------------
    def request_code(self, email, purpose, role, payload=None) -> PasscodeEntry:
        email = normalize_email(email)
        role = Role(role)
        if purpose not in PURPOSES:
            raise ValidationFailed("Invalid OTP purpose")

        if purpose == PURPOSE_REGISTRATION:
            if role not in REGISTRABLE_ROLES:
                raise ValidationFailed("Invalid role for OTP registration")
            self._ensure_unique(role, email, payload or {})
            payload = dict(payload or {})
            # only the digest is ever stored
            if payload.get("password"):
                payload["password"] = make_password(payload["password"])
        else:
            if find_by_email(role, email) is None:
                raise IdentityNotFound()
            payload = {}

        now = self.clock()
        self._check_resend_interval(email, now)

        entry = PasscodeEntry(
            code=generate_code(),
            purpose=purpose,
            role=role.value,
            issued_at=now,
            expires_at=now + timedelta(seconds=self.ttl),
            payload=payload,
        )
        self._put(email, entry, self.ttl)
        logger.info("Issued %s code for %s (%s)", purpose, mask_email(email), role.value)

        try:
            self.deliver(email, entry.code)
        except Exception:
            # an undelivered code must not stay redeemable
            self._drop(email)
            raise
        return entry

    def _ensure_unique(self, role, email, payload):
        model = identity_model(role)
        if model.objects.filter(email=email).exists():
            logger.info("Duplicate email on registration: %s", mask_email(email))
            raise DuplicateIdentity("email")
        license_number = (payload.get("license_number") or "").strip()
        if role == Role.HOSPITAL and license_number:
            if model.objects.filter(license_number=license_number).exists():
                logger.info("Duplicate license number on registration: %s", license_number)
                raise DuplicateIdentity("license_number")

    def _check_resend_interval(self, email, now):
        if self.resend_interval <= 0:
            return
        previous = self.get_entry(email)
        if previous and now < previous.issued_at + timedelta(seconds=self.resend_interval):
            wait = int((previous.issued_at + timedelta(seconds=self.resend_interval) - now).total_seconds()) + 1
            raise CodeRequestTooSoon(retryAfter=wait)

    # ---------------- verify ----------------
    def _redeem(self, email, code, purpose) -> PasscodeEntry:
        entry = self.get_entry(email)
        if entry is None or entry.purpose != purpose or entry.verified or self.clock() > entry.expires_at:
            raise CodeExpired()
        if not hmac.compare_digest(entry.code, str(code or "").strip()):
            raise CodeMismatch()
        return entry

    def verify_code(self, email, code, purpose):
        """
        Registration: returns (identity, session_token) and consumes the entry.
        Reset: returns the entry, now marked verified for ``reset_password``.
        """
        email = normalize_email(email)
        entry = self._redeem(email, code, purpose)

        if purpose == PURPOSE_REGISTRATION:
            identity = self._materialize(email, entry)
            self._drop(email)
            logger.info("Registered %s #%s via OTP", entry.role, identity.pk)
            return identity, issue_for(identity)

        entry.verified = True
        entry.expires_at = self.clock() + timedelta(seconds=self.reset_window)
        self._put(email, entry, self.reset_window)
        return entry

    def _materialize(self, email, entry):
        model = identity_model(entry.role)
        identity = model(email=email, **entry.payload)
        if entry.role == Role.HOSPITAL:
            identity.is_verified = False
        try:
            with transaction.atomic():
                identity.save()
                record(identity, "register", email=email)
        except IntegrityError:
            # lost a race with another registration for the same email/license
            if model.objects.filter(email=email).exists():
                raise DuplicateIdentity("email")
            raise DuplicateIdentity("license_number")
        return identity

    def reset_password(self, email, role, new_password):
        email = normalize_email(email)
        role = Role(role)
        entry = self.get_entry(email)
        if (entry is None or entry.purpose != PURPOSE_RESET or not entry.verified
                or entry.role != role.value or self.clock() > entry.expires_at):
            raise ResetNotVerified()

        identity = find_by_email(role, email)
        if identity is None:
            raise IdentityNotFound()

        identity.set_password(new_password)
        identity.save(update_fields=["password", "updated_at"])
        record(identity, "reset_password")
        self._drop(email)
        logger.info("Password reset for %s #%s", role.value, identity.pk)
        return identity
