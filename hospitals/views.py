from django.db.models import Count

from accounts.models import Role
from accounts.permissions import session_required
from core.api import api_view, json_body, snake_keys, validated, merged_with_instance
from .forms import BloodCampForm, CampStatusForm, AttendanceForm
from .models import BloodCamp, CampInterest
from . import services


def _camp_with_hospital(camp):
    data = camp.to_dict()
    data["createdBy"] = camp.hospital.to_public_dict()
    return data


# ---------------- collection ----------------
@api_view("POST")
@session_required(Role.HOSPITAL)
def camp_create(request):
    data = validated(BloodCampForm(snake_keys(json_body(request))))
    camp = services.create_camp(request.identity, data)
    return camp.to_dict(include_donors=True), 201


@api_view("GET")
def camp_public_list(request):
    camps = services.public_camps(location=request.GET.get("location"))
    return [_camp_with_hospital(c) for c in camps]


@api_view("GET")
@session_required(Role.HOSPITAL)
def camp_hospital_list(request):
    camps = services.hospital_camps(request.identity, status=request.GET.get("status"))
    return [c.to_dict(include_donors=True) for c in camps]


@api_view("GET")
@session_required(Role.DONOR)
def camp_donor_list(request):
    interested = request.GET.get("interested") == "true"
    return services.donor_camps(request.identity, interested_only=interested)


@api_view("GET")
@session_required(Role.ADMIN)
def camp_admin_list(request):
    camps = BloodCamp.objects.select_related("hospital").order_by("-date")
    rows = []
    for camp in camps:
        data = camp.to_dict(include_donors=True)
        data["createdBy"] = camp.hospital.to_dict()
        rows.append(data)
    return rows


@api_view("POST")
@session_required(Role.ADMIN)
def camp_sweep(request):
    updated = services.sweep_camp_statuses()
    return {
        "message": "Blood camp status update triggered successfully",
        "result": {"success": True, "updatedCount": updated},
    }


# ---------------- single camp ----------------
@api_view("GET", "PATCH", "DELETE")
def camp_detail(request, camp_id):
    if request.method == "PATCH":
        return _camp_update(request, camp_id)
    if request.method == "DELETE":
        return _camp_delete(request, camp_id)

    camp = services.get_camp(camp_id)
    data = camp.to_dict(include_donors=True)
    data["createdBy"] = camp.hospital.to_public_dict()
    return data


@session_required(Role.HOSPITAL)
def _camp_update(request, camp_id):
    camp = services.get_owned_camp(camp_id, request.identity)
    incoming = snake_keys(json_body(request))
    form = BloodCampForm(merged_with_instance(camp, services.MUTABLE_CAMP_FIELDS, incoming), instance=camp)
    data = validated(form)
    camp = services.update_camp(camp_id, request.identity, {k: data[k] for k in incoming if k in data})
    return {"message": "Blood camp updated successfully", "bloodCamp": camp.to_dict()}


@session_required(Role.HOSPITAL)
def _camp_delete(request, camp_id):
    services.delete_camp(camp_id, request.identity)
    return {"message": "Blood camp deleted successfully"}


@api_view("POST")
@session_required(Role.HOSPITAL)
def camp_cancel(request, camp_id):
    camp = services.cancel_camp(camp_id, request.identity)
    return {"message": "Blood camp cancelled", "bloodCamp": camp.to_dict()}


@api_view("POST")
@session_required(Role.HOSPITAL)
def camp_status(request, camp_id):
    data = validated(CampStatusForm(json_body(request)))
    camp = services.set_camp_status(camp_id, request.identity, data["status"])
    return {"message": "Blood camp status updated", "bloodCamp": camp.to_dict()}


# ---------------- interest / attendance ----------------
@api_view("POST", "DELETE")
@session_required(Role.DONOR)
def camp_interest(request, camp_id):
    if request.method == "DELETE":
        camp, count = services.cancel_interest(camp_id, request.identity)
        return {
            "message": "Successfully cancelled interest in blood camp",
            "bloodCampId": camp.pk,
            "interestedDonorsCount": count,
        }

    camp, count = services.register_interest(camp_id, request.identity)
    return {
        "message": "Successfully registered interest in blood camp",
        "bloodCamp": {
            "_id": camp.pk,
            "title": camp.title,
            "date": camp.date.isoformat(),
            "location": camp.location,
            "interestedDonorsCount": count,
        },
    }


@api_view("PATCH")
@session_required(Role.HOSPITAL)
def camp_attendance(request, camp_id, donor_id):
    data = validated(AttendanceForm(json_body(request)))
    interest = services.set_attendance(camp_id, request.identity, donor_id, data["status"])
    return {
        "message": "Donor attendance status updated successfully",
        "donorId": interest.donor_id,
        "status": interest.status,
    }


@api_view("GET")
@session_required(Role.HOSPITAL)
def camp_stats(request):
    """Per-status camp counts and attendance totals for the hospital dashboard."""
    camps = request.identity.camps.all()
    by_status = {row["status"]: row["n"] for row in camps.values("status").annotate(n=Count("id"))}
    attendance = {
        row["status"]: row["n"]
        for row in CampInterest.objects.filter(camp__hospital=request.identity)
        .values("status").annotate(n=Count("id"))
    }
    return {
        "camps": {s: by_status.get(s, 0) for s in BloodCamp.Status.values},
        "attendance": {s: attendance.get(s, 0) for s in services.Attendance.values},
    }
