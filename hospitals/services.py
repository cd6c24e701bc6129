"""
Blood camp lifecycle and the per-camp donor interest ledger.

Writes that touch a camp's interest list lock the camp row first
(select_for_update) and rely on the (camp, donor) unique constraint, so two
concurrent registrations for the same pair can never both succeed.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.errors import (
    AlreadyRegistered, CampClosed, CampNotFound, Forbidden, IdentityNotFound,
    InterestNotFound, NotRegistered, NotVerified, ValidationFailed,
)
from communication.services import send_notice_email
from core.history import record
from .models import BloodCamp, CampInterest, Hospital

logger = logging.getLogger(__name__)

Status = BloodCamp.Status
Attendance = CampInterest.Status

MUTABLE_CAMP_FIELDS = ("title", "description", "location", "date", "time", "contact_info")

# allowed lifecycle moves driven by the owning hospital
CAMP_TRANSITIONS = {
    Status.UPCOMING: {Status.ONGOING, Status.COMPLETED, Status.CANCELLED},
    Status.ONGOING: {Status.COMPLETED, Status.CANCELLED},
    Status.COMPLETED: set(),
    Status.CANCELLED: set(),
}


def get_camp(camp_id, lock=False):
    qs = BloodCamp.objects.select_related("hospital")
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=camp_id)
    except BloodCamp.DoesNotExist:
        raise CampNotFound()


def get_owned_camp(camp_id, hospital, lock=False):
    camp = get_camp(camp_id, lock=lock)
    if camp.hospital_id != hospital.pk:
        raise Forbidden("Not authorized to manage this blood camp")
    return camp


# ---------------- camp management ----------------
def create_camp(hospital, fields):
    if not hospital.is_verified:
        raise NotVerified()

    camp = BloodCamp.objects.create(
        hospital=hospital,
        status=Status.UPCOMING,
        **{k: fields[k] for k in MUTABLE_CAMP_FIELDS},
    )
    logger.info("Hospital #%s created camp #%s '%s' on %s", hospital.pk, camp.pk, camp.title, camp.date)
    return camp


@transaction.atomic
def update_camp(camp_id, hospital, fields):
    """Only the descriptive fields change here; status has its own transitions."""
    camp = get_owned_camp(camp_id, hospital, lock=True)
    changed = [k for k in MUTABLE_CAMP_FIELDS if k in fields]
    for k in changed:
        setattr(camp, k, fields[k])
    if changed:
        camp.save(update_fields=changed + ["updated_at"])
    return camp


@transaction.atomic
def delete_camp(camp_id, hospital):
    camp = get_owned_camp(camp_id, hospital, lock=True)
    logger.info("Hospital #%s deleted camp #%s", hospital.pk, camp.pk)
    camp.delete()


@transaction.atomic
def set_camp_status(camp_id, hospital, status):
    try:
        status = Status(status)
    except ValueError:
        raise ValidationFailed("Invalid status value", errors={"status": [f"Unknown status: {status!r}"]})

    camp = get_owned_camp(camp_id, hospital, lock=True)
    if status == camp.status:
        return camp
    if not CAMP_TRANSITIONS[Status(camp.status)]:
        raise CampClosed(f"Blood camp is already {camp.status}")
    if status not in CAMP_TRANSITIONS[Status(camp.status)]:
        raise ValidationFailed(f"Cannot move a camp from {camp.status} to {status.value}")

    previous = camp.status
    camp.status = status
    camp.save(update_fields=["status", "updated_at"])
    logger.info("Camp #%s status %s -> %s by hospital #%s", camp.pk, previous, status.value, hospital.pk)
    return camp


def cancel_camp(camp_id, hospital):
    """Soft cancel: the camp and its interest list stay on record."""
    return set_camp_status(camp_id, hospital, Status.CANCELLED)


# ---------------- interest ledger ----------------
def interest_count(camp):
    return CampInterest.objects.filter(camp=camp).count()


@transaction.atomic
def register_interest(camp_id, donor):
    camp = get_camp(camp_id, lock=True)
    if camp.status == Status.CANCELLED:
        raise CampClosed()

    if CampInterest.objects.filter(camp=camp, donor=donor).exists():
        raise AlreadyRegistered()
    try:
        with transaction.atomic():
            CampInterest.objects.create(camp=camp, donor=donor, status=Attendance.REGISTERED)
    except IntegrityError:
        # the unique constraint caught a concurrent insert
        raise AlreadyRegistered()

    record(donor, "register_blood_camp", campId=camp.pk, campTitle=camp.title, campDate=camp.date.isoformat())
    count = interest_count(camp)
    logger.info("Donor #%s registered for camp #%s (now %s)", donor.pk, camp.pk, count)
    return camp, count


@transaction.atomic
def cancel_interest(camp_id, donor):
    camp = get_camp(camp_id, lock=True)
    deleted, _ = CampInterest.objects.filter(camp=camp, donor=donor).delete()
    if not deleted:
        raise NotRegistered()

    record(donor, "cancel_blood_camp_registration", campId=camp.pk, campTitle=camp.title,
           campDate=camp.date.isoformat())
    count = interest_count(camp)
    logger.info("Donor #%s cancelled interest in camp #%s (now %s)", donor.pk, camp.pk, count)
    return camp, count


@transaction.atomic
def set_attendance(camp_id, hospital, donor_id, status):
    """
    Any attendance value may follow any other (hospitals correct mistakes);
    every change is logged and written to History.
    """
    if status not in Attendance.values:
        raise ValidationFailed("Invalid status value", errors={"status": [f"Must be one of {Attendance.values}"]})

    camp = get_owned_camp(camp_id, hospital, lock=True)
    try:
        interest = CampInterest.objects.select_for_update().get(camp=camp, donor_id=donor_id)
    except CampInterest.DoesNotExist:
        raise InterestNotFound()

    previous = interest.status
    if previous != status:
        interest.status = status
        interest.save(update_fields=["status"])

    logger.info("Camp #%s donor #%s attendance %s -> %s by hospital #%s",
                camp.pk, donor_id, previous, status, hospital.pk)
    record(hospital, "update_attendance", campId=camp.pk, donorId=int(donor_id), **{"from": previous, "to": status})
    return interest


# ---------------- sweeper ----------------
def sweep_camp_statuses(now=None):
    """
    Mark upcoming camps whose date is more than the grace period in the past
    as completed. Single conditional UPDATE; re-running finds nothing new.
    """
    now = now or timezone.now()
    grace = int(getattr(settings, "CAMP_COMPLETION_GRACE_HOURS", 24))
    cutoff = now - timedelta(hours=grace)

    updated = (
        BloodCamp.objects
        .filter(status=Status.UPCOMING, date__lt=cutoff)
        .update(status=Status.COMPLETED, updated_at=now)
    )
    if updated:
        logger.info("Marked %s blood camp(s) dated before %s as completed", updated, cutoff.isoformat())
    return updated


# ---------------- listings ----------------
def public_camps(location=None):
    qs = BloodCamp.objects.select_related("hospital").order_by("date")
    if location:
        qs = qs.filter(location__icontains=location.strip())
    return qs


def hospital_camps(hospital, status=None):
    qs = hospital.camps.prefetch_related("interests__donor").order_by("-date")
    if status == Status.UPCOMING:
        qs = qs.filter(status=Status.UPCOMING)
    elif status == Status.COMPLETED:
        qs = qs.filter(status__in=[Status.COMPLETED, Status.CANCELLED])
    return qs


def donor_camps(donor, interested_only=False):
    qs = (
        BloodCamp.objects
        .filter(status__in=BloodCamp.OPEN_STATUSES)
        .select_related("hospital")
        .order_by("date")
    )
    if interested_only:
        qs = qs.filter(interests__donor=donor)

    interested_ids = set(
        CampInterest.objects.filter(donor=donor).values_list("camp_id", flat=True)
    )
    rows = []
    for camp in qs:
        rows.append({
            "_id": camp.pk,
            "title": camp.title,
            "description": camp.description,
            "location": camp.location,
            "date": camp.date.isoformat(),
            "time": camp.time,
            "contactInfo": camp.contact_info,
            "status": camp.status,
            "hospital": {"_id": camp.hospital_id, "name": camp.hospital.name, "location": camp.hospital.location},
            "isInterested": camp.pk in interested_ids,
            "interestedDonorsCount": camp.interests.count(),
            "createdAt": camp.created_at.isoformat(),
            "updatedAt": camp.updated_at.isoformat(),
        })
    return rows


# ---------------- hospital verification ----------------
@transaction.atomic
def set_hospital_verified(hospital_id, admin=None, is_verified=None, staff_username=None):
    """
    Set the verified flag, or flip it when `is_verified` is None.

    API calls pass the AdminAccount and the History row is written under it.
    Django admin site users are not platform identities, so their changes are
    written under the hospital with the staff username.
    """
    try:
        hospital = Hospital.objects.select_for_update().get(pk=hospital_id)
    except Hospital.DoesNotExist:
        raise IdentityNotFound("Hospital not found")

    hospital.is_verified = (not hospital.is_verified) if is_verified is None else bool(is_verified)
    hospital.save(update_fields=["is_verified", "updated_at"])

    if admin is not None:
        logger.info("Admin #%s set hospital #%s verified=%s", admin.pk, hospital.pk, hospital.is_verified)
        record(admin, "verify_hospital", hospitalId=hospital.pk, isVerified=hospital.is_verified)
    else:
        logger.info("Staff %s set hospital #%s verified=%s", staff_username, hospital.pk, hospital.is_verified)
        record(hospital, "verify_hospital", hospitalId=hospital.pk, isVerified=hospital.is_verified,
               verifiedBy=staff_username)
    transaction.on_commit(lambda: notify_verification(hospital))
    return hospital


def notify_verification(hospital):
    if hospital.is_verified:
        subject = "RaktSetu - Hospital Verified"
        body = (
            f"Dear {hospital.contact_person or hospital.name},\n\n"
            f"Your hospital '{hospital.name}' has been verified.\n"
            f"You can now organise blood camps and search donors.\n\n"
            f"RaktSetu Team"
        )
    else:
        subject = "RaktSetu - Hospital Verification Revoked"
        body = (
            f"Dear {hospital.contact_person or hospital.name},\n\n"
            f"Verification for '{hospital.name}' has been revoked by the platform admin.\n\n"
            f"RaktSetu Team"
        )
    send_notice_email(hospital.email, subject, body)
