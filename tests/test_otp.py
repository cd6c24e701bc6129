from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.contrib.auth.hashers import check_password
from django.core import mail
from django.core.cache import caches

from accounts.models import Donor, Role
from accounts.otp import OtpBroker, PURPOSE_REGISTRATION, PURPOSE_RESET
from accounts.tokens import authenticate
from core.errors import (
    CodeExpired, CodeMismatch, CodeRequestTooSoon, DeliveryFailure,
    DuplicateIdentity, IdentityNotFound, ResetNotVerified,
)
from core.models import History
from hospitals.models import Hospital
from tests.factories import make_hospital

pytestmark = pytest.mark.django_db

DONOR_PAYLOAD = {
    "name": "Meera Shah", "blood_group": "B+", "age": 27, "gender": "Female",
    "city": "Mumbai", "state": "Maharashtra", "phone": "9820012345", "password": "hunter22",
}

HOSPITAL_PAYLOAD = {
    "name": "Lotus Hospital", "license_number": "LIC-900", "contact_person": "Dr. Rao",
    "phone": "022-5550199", "city": "Mumbai", "state": "Maharashtra", "password": "hunter22",
}


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 3, 1, 9, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class Outbox:
    def __init__(self):
        self.sent = []

    def __call__(self, address, code):
        self.sent.append((address, code))

    @property
    def last_code(self):
        return self.sent[-1][1]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def broker(clock, outbox):
    return OtpBroker(store=caches["otp"], deliver=outbox, clock=clock)


def test_registration_round_trip_creates_donor_and_consumes_entry(broker, outbox):
    broker.request_code("Meera@Example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    assert outbox.sent[0][0] == "meera@example.com"

    identity, token = broker.verify_code("meera@example.com", outbox.last_code, PURPOSE_REGISTRATION)

    assert isinstance(identity, Donor)
    assert identity.email == "meera@example.com"
    assert identity.check_password("hunter22")
    assert authenticate(token).identity_id == identity.pk
    assert broker.get_entry("meera@example.com") is None
    assert History.objects.filter(user_id=identity.pk, user_type="Donor", action="register").exists()


def test_pending_password_is_stored_hashed(broker):
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    stored = broker.get_entry("meera@example.com").payload["password"]
    assert stored != "hunter22"
    assert check_password("hunter22", stored)


def test_code_is_six_digits(broker, outbox):
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    code = outbox.last_code
    assert len(code) == 6 and code.isdigit()


def test_code_expires_after_sixty_seconds(broker, clock, outbox):
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    clock.advance(seconds=61)

    with pytest.raises(CodeExpired):
        broker.verify_code("meera@example.com", outbox.last_code, PURPOSE_REGISTRATION)
    assert not Donor.objects.filter(email="meera@example.com").exists()


def test_code_still_valid_at_fifty_nine_seconds(broker, clock, outbox):
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    clock.advance(seconds=59)
    identity, _ = broker.verify_code("meera@example.com", outbox.last_code, PURPOSE_REGISTRATION)
    assert identity.pk


def test_wrong_code_is_a_mismatch_and_keeps_the_entry(broker, outbox):
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    wrong = "000000" if outbox.last_code != "000000" else "111111"

    with pytest.raises(CodeMismatch):
        broker.verify_code("meera@example.com", wrong, PURPOSE_REGISTRATION)
    assert broker.get_entry("meera@example.com") is not None


def test_unknown_email_reports_expired(broker):
    with pytest.raises(CodeExpired):
        broker.verify_code("nobody@example.com", "123456", PURPOSE_REGISTRATION)


def test_newer_request_replaces_older_code(broker, outbox):
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    first, second = outbox.sent[0][1], outbox.sent[1][1]

    if first != second:
        with pytest.raises(CodeMismatch):
            broker.verify_code("meera@example.com", first, PURPOSE_REGISTRATION)
    identity, _ = broker.verify_code("meera@example.com", second, PURPOSE_REGISTRATION)
    assert identity.pk


def test_duplicate_email_rejected_before_sending(broker, outbox, donor):
    with pytest.raises(DuplicateIdentity) as exc:
        broker.request_code(donor.email, PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    assert exc.value.extra["field"] == "email"
    assert outbox.sent == []


def test_duplicate_license_number_rejected(broker, outbox, hospital):
    payload = dict(HOSPITAL_PAYLOAD, license_number=hospital.license_number)
    with pytest.raises(DuplicateIdentity) as exc:
        broker.request_code("other@hospital.org", PURPOSE_REGISTRATION, Role.HOSPITAL, payload=payload)
    assert exc.value.extra["field"] == "license_number"
    assert outbox.sent == []


def test_same_email_may_register_under_another_role(broker, outbox, donor):
    payload = dict(HOSPITAL_PAYLOAD)
    broker.request_code(donor.email, PURPOSE_REGISTRATION, Role.HOSPITAL, payload=payload)
    identity, _ = broker.verify_code(donor.email, outbox.last_code, PURPOSE_REGISTRATION)
    assert isinstance(identity, Hospital)
    assert identity.is_verified is False


def test_delivery_failure_drops_the_entry(clock):
    def failing(address, code):
        raise DeliveryFailure()

    broker = OtpBroker(store=caches["otp"], deliver=failing, clock=clock)
    with pytest.raises(DeliveryFailure):
        broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    assert broker.get_entry("meera@example.com") is None


def test_resend_throttle(clock, outbox):
    broker = OtpBroker(store=caches["otp"], deliver=outbox, clock=clock, resend_interval_seconds=30)
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))

    clock.advance(seconds=10)
    with pytest.raises(CodeRequestTooSoon) as exc:
        broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    assert exc.value.extra["retryAfter"] == 21

    clock.advance(seconds=20)
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))
    assert len(outbox.sent) == 2


def test_default_mail_delivery_sends_code(clock):
    broker = OtpBroker(store=caches["otp"], clock=clock)
    broker.request_code("meera@example.com", PURPOSE_REGISTRATION, Role.DONOR, payload=dict(DONOR_PAYLOAD))

    assert len(mail.outbox) == 1
    assert mail.outbox[0].to == ["meera@example.com"]
    assert broker.get_entry("meera@example.com").code in mail.outbox[0].body


# ---------------- password reset ----------------
def test_reset_requires_existing_account(broker):
    with pytest.raises(IdentityNotFound):
        broker.request_code("ghost@example.com", PURPOSE_RESET, Role.DONOR)


def test_reset_flow(broker, clock, outbox, donor):
    broker.request_code(donor.email, PURPOSE_RESET, Role.DONOR)
    entry = broker.verify_code(donor.email, outbox.last_code, PURPOSE_RESET)
    assert entry.verified

    # the verified entry outlives the 60 second code window
    clock.advance(minutes=5)
    broker.reset_password(donor.email, Role.DONOR, "newpass99")

    donor.refresh_from_db()
    assert donor.check_password("newpass99")
    assert broker.get_entry(donor.email) is None


def test_reset_without_verification_is_refused(broker, donor):
    broker.request_code(donor.email, PURPOSE_RESET, Role.DONOR)
    with pytest.raises(ResetNotVerified):
        broker.reset_password(donor.email, Role.DONOR, "newpass99")


def test_reset_role_must_match(broker, outbox, donor):
    make_hospital(email=donor.email, license_number="LIC-777")
    broker.request_code(donor.email, PURPOSE_RESET, Role.DONOR)
    broker.verify_code(donor.email, outbox.last_code, PURPOSE_RESET)

    with pytest.raises(ResetNotVerified):
        broker.reset_password(donor.email, Role.HOSPITAL, "newpass99")


def test_verified_reset_entry_cannot_be_redeemed_twice(broker, outbox, donor):
    broker.request_code(donor.email, PURPOSE_RESET, Role.DONOR)
    code = outbox.last_code
    broker.verify_code(donor.email, code, PURPOSE_RESET)
    with pytest.raises(CodeExpired):
        broker.verify_code(donor.email, code, PURPOSE_RESET)


def test_reset_code_cannot_complete_registration(broker, outbox, donor):
    broker.request_code(donor.email, PURPOSE_RESET, Role.DONOR)
    with pytest.raises(CodeExpired):
        broker.verify_code(donor.email, outbox.last_code, PURPOSE_REGISTRATION)
