"""Hospital profile, donor search and the admin directories."""
from accounts.models import Donor, Role
from accounts.permissions import session_required
from blood.eligibility import is_eligible
from blood.matching import search_donors
from core.api import api_view, json_body, snake_keys, validated, merged_with_instance
from core.errors import NotVerified
from core.history import record
from .forms import HospitalProfileForm, VerifyHospitalForm
from .models import Hospital
from . import services

PROFILE_FIELDS = ["name", "contact_person", "phone", "city", "state"]


@api_view("GET", "PATCH")
@session_required(Role.HOSPITAL)
def hospital_profile(request):
    hospital = request.identity
    if request.method == "GET":
        return hospital.to_dict()

    incoming = snake_keys(json_body(request))
    form = HospitalProfileForm(merged_with_instance(hospital, PROFILE_FIELDS, incoming), instance=hospital)
    validated(form)
    hospital = form.save()
    record(hospital, "update_profile", fields=sorted(k for k in incoming if k in PROFILE_FIELDS))
    return {"message": "Profile updated successfully", "hospital": hospital.to_dict()}


@api_view("GET")
@session_required(Role.HOSPITAL)
def hospital_search_donors(request):
    if not request.identity.is_verified:
        raise NotVerified()

    params = request.GET
    donors = search_donors(
        blood_group=params.get("bloodGroup"),
        city=params.get("city"),
        compatible=params.get("compatible") == "true",
        eligible_only=params.get("eligible") == "true",
    )
    rows = []
    for donor in donors:
        row = donor.to_summary()
        row["eligible"] = is_eligible(donor)
        rows.append(row)
    return rows


@api_view("GET")
@session_required(Role.ADMIN)
def admin_hospitals(request):
    qs = Hospital.objects.all()
    verified = request.GET.get("verified")
    if verified in ("true", "false"):
        qs = qs.filter(is_verified=(verified == "true"))
    return [h.to_dict() for h in qs]


@api_view("GET")
@session_required(Role.ADMIN)
def admin_donors(request):
    qs = Donor.objects.all()
    group = request.GET.get("bloodGroup")
    if group:
        qs = qs.filter(blood_group=group.strip().upper())
    return [d.to_dict() for d in qs]


@api_view("POST")
@session_required(Role.ADMIN)
def admin_verify_hospital(request, hospital_id):
    body = snake_keys(json_body(request))
    is_verified = None
    if "is_verified" in body:
        is_verified = validated(VerifyHospitalForm(body))["is_verified"]

    hospital = services.set_hospital_verified(hospital_id, request.identity, is_verified)
    state = "verified" if hospital.is_verified else "unverified"
    return {"message": f"Hospital {state} successfully", "hospital": hospital.to_dict()}
