import logging

from django.utils import timezone

from accounts.forms import DonorProfileForm, AvailabilityForm, LastDonationForm
from accounts.models import Role
from accounts.permissions import session_required
from core.api import api_view, json_body, snake_keys, validated, merged_with_instance
from core.errors import ValidationFailed
from core.history import record
from hospitals.models import Hospital
from .eligibility import eligibility_report

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ["name", "blood_group", "age", "gender", "city", "state", "phone", "is_available"]


@api_view("GET", "PATCH")
@session_required(Role.DONOR)
def donor_profile(request):
    donor = request.identity
    if request.method == "GET":
        return donor.to_dict()

    incoming = snake_keys(json_body(request))
    form = DonorProfileForm(merged_with_instance(donor, PROFILE_FIELDS, incoming), instance=donor)
    validated(form)
    donor = form.save()

    updated = sorted(k for k in incoming if k in PROFILE_FIELDS)
    if updated:
        record(donor, "update_profile", updatedFields=updated)
    return donor.to_dict()


@api_view("PATCH")
@session_required(Role.DONOR)
def donor_availability(request):
    donor = request.identity
    data = validated(AvailabilityForm(snake_keys(json_body(request))))
    donor.is_available = data["is_available"]
    donor.save(update_fields=["is_available", "updated_at"])
    logger.info("Donor #%s availability -> %s", donor.pk, donor.is_available)
    record(donor, "update_profile", updatedFields=["is_available"])
    return {"message": "Availability updated successfully", "donor": donor.to_dict()}


@api_view("PATCH")
@session_required(Role.DONOR)
def donor_last_donation(request):
    donor = request.identity
    data = validated(LastDonationForm(snake_keys(json_body(request))))
    if data["last_donation"] > timezone.localdate():
        raise ValidationFailed("Last donation date cannot be in the future",
                               errors={"last_donation": ["Date is in the future."]})

    donor.last_donation = data["last_donation"]
    donor.save(update_fields=["last_donation", "updated_at"])
    record(donor, "update_profile", updatedFields=["last_donation"])
    return {"message": "Last donation date updated successfully", "donor": donor.to_dict()}


@api_view("GET")
@session_required(Role.DONOR)
def donor_hospitals(request):
    hospitals = Hospital.objects.filter(is_verified=True).order_by("name")
    rows = []
    for h in hospitals:
        row = h.to_public_dict()
        row.update({"email": h.email, "licenseNumber": h.license_number, "contactPerson": h.contact_person})
        rows.append(row)
    return rows


@api_view("GET")
@session_required(Role.DONOR)
def donor_eligibility(request):
    return eligibility_report(request.identity)
