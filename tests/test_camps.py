from datetime import timedelta

import pytest
from django.utils import timezone

from core.errors import (
    AlreadyRegistered, CampClosed, CampNotFound, Forbidden, InterestNotFound,
    NotRegistered, NotVerified, ValidationFailed,
)
from core.models import History
from hospitals import services
from hospitals.models import BloodCamp, CampInterest
from tests.factories import make_camp, make_hospital

pytestmark = pytest.mark.django_db

CAMP_FIELDS = {
    "title": "Winter Drive", "description": "", "location": "Civil Lines",
    "date": timezone.now() + timedelta(days=3), "time": "09:00", "contact_info": "",
}


def test_create_camp_starts_upcoming(hospital):
    camp = services.create_camp(hospital, CAMP_FIELDS)
    assert camp.status == BloodCamp.Status.UPCOMING
    assert camp.hospital == hospital
    assert services.interest_count(camp) == 0


def test_unverified_hospital_cannot_create_camp(unverified_hospital):
    with pytest.raises(NotVerified):
        services.create_camp(unverified_hospital, CAMP_FIELDS)


def test_register_interest_twice(camp, donor):
    _, count = services.register_interest(camp.pk, donor)
    assert count == 1

    with pytest.raises(AlreadyRegistered):
        services.register_interest(camp.pk, donor)
    assert CampInterest.objects.filter(camp=camp, donor=donor).count() == 1


def test_register_interest_counts_distinct_donors(camp, donor, other_donor):
    services.register_interest(camp.pk, donor)
    _, count = services.register_interest(camp.pk, other_donor)
    assert count == 2
    assert [i.donor_id for i in camp.interests.all()] == [donor.pk, other_donor.pk]


def test_register_interest_unknown_camp(donor):
    with pytest.raises(CampNotFound):
        services.register_interest(999999, donor)


def test_cancelled_camp_refuses_interest(camp, donor, hospital):
    services.cancel_camp(camp.pk, hospital)
    with pytest.raises(CampClosed):
        services.register_interest(camp.pk, donor)


def test_cancel_interest(camp, donor):
    services.register_interest(camp.pk, donor)
    _, count = services.cancel_interest(camp.pk, donor)
    assert count == 0

    with pytest.raises(NotRegistered):
        services.cancel_interest(camp.pk, donor)


def test_interest_writes_history(camp, donor):
    services.register_interest(camp.pk, donor)
    services.cancel_interest(camp.pk, donor)
    actions = set(History.objects.filter(user_id=donor.pk, user_type="Donor").values_list("action", flat=True))
    assert {"register_blood_camp", "cancel_blood_camp_registration"} <= actions


# ---------------- attendance ----------------
def test_set_attendance(camp, donor, hospital):
    services.register_interest(camp.pk, donor)
    interest = services.set_attendance(camp.pk, hospital, donor.pk, "attended")
    assert interest.status == "attended"

    # hospitals may correct a mistake
    interest = services.set_attendance(camp.pk, hospital, donor.pk, "no-show")
    assert interest.status == "no-show"
    assert History.objects.filter(user_id=hospital.pk, user_type="Hospital", action="update_attendance").count() == 2


def test_set_attendance_rejects_unknown_status(camp, donor, hospital):
    services.register_interest(camp.pk, donor)
    with pytest.raises(ValidationFailed):
        services.set_attendance(camp.pk, hospital, donor.pk, "maybe")


def test_set_attendance_for_donor_without_interest(camp, donor, hospital):
    with pytest.raises(InterestNotFound):
        services.set_attendance(camp.pk, hospital, donor.pk, "attended")


def test_only_owner_sets_attendance(camp, donor):
    services.register_interest(camp.pk, donor)
    stranger = make_hospital(email="other@hospital.org", license_number="LIC-555")
    with pytest.raises(Forbidden):
        services.set_attendance(camp.pk, stranger, donor.pk, "attended")


# ---------------- management ----------------
def test_update_camp_changes_only_given_fields(camp, hospital):
    updated = services.update_camp(camp.pk, hospital, {"title": "Renamed"})
    assert updated.title == "Renamed"
    assert updated.location == camp.location


def test_only_owner_updates_or_deletes(camp):
    stranger = make_hospital(email="other@hospital.org", license_number="LIC-555")
    with pytest.raises(Forbidden):
        services.update_camp(camp.pk, stranger, {"title": "Hijacked"})
    with pytest.raises(Forbidden):
        services.delete_camp(camp.pk, stranger)


def test_delete_camp_removes_interests(camp, donor, hospital):
    services.register_interest(camp.pk, donor)
    services.delete_camp(camp.pk, hospital)
    assert not BloodCamp.objects.filter(pk=camp.pk).exists()
    assert not CampInterest.objects.filter(camp_id=camp.pk).exists()


def test_cancel_camp_keeps_interest_list(camp, donor, hospital):
    services.register_interest(camp.pk, donor)
    cancelled = services.cancel_camp(camp.pk, hospital)
    assert cancelled.status == BloodCamp.Status.CANCELLED
    assert services.interest_count(cancelled) == 1


def test_status_transitions(hospital):
    camp = make_camp(hospital)
    assert services.set_camp_status(camp.pk, hospital, "ongoing").status == "ongoing"
    with pytest.raises(ValidationFailed):
        services.set_camp_status(camp.pk, hospital, "upcoming")
    assert services.set_camp_status(camp.pk, hospital, "completed").status == "completed"
    with pytest.raises(CampClosed):
        services.set_camp_status(camp.pk, hospital, "cancelled")


def test_unknown_status_value(camp, hospital):
    with pytest.raises(ValidationFailed):
        services.set_camp_status(camp.pk, hospital, "postponed")


# ---------------- listings ----------------
def test_donor_camps_flags_interest(hospital, donor):
    first = make_camp(hospital, title="First")
    make_camp(hospital, title="Second")
    make_camp(hospital, title="Gone", status=BloodCamp.Status.CANCELLED)
    services.register_interest(first.pk, donor)

    rows = services.donor_camps(donor)
    assert [r["title"] for r in rows] == ["First", "Second"]
    flagged = {r["title"]: (r["isInterested"], r["interestedDonorsCount"]) for r in rows}
    assert flagged["First"] == (True, 1)
    assert flagged["Second"] == (False, 0)

    only_mine = services.donor_camps(donor, interested_only=True)
    assert [r["title"] for r in only_mine] == ["First"]


def test_public_camps_filter_by_location(hospital):
    make_camp(hospital, location="Pune Town Hall")
    make_camp(hospital, location="Nashik Road")
    assert [c.location for c in services.public_camps("pune")] == ["Pune Town Hall"]


def test_hospital_camps_status_filter(hospital):
    make_camp(hospital, title="Open")
    make_camp(hospital, title="Done", status=BloodCamp.Status.COMPLETED)
    make_camp(hospital, title="Called off", status=BloodCamp.Status.CANCELLED)

    assert [c.title for c in services.hospital_camps(hospital, "upcoming")] == ["Open"]
    assert {c.title for c in services.hospital_camps(hospital, "completed")} == {"Done", "Called off"}
    assert services.hospital_camps(hospital).count() == 3
