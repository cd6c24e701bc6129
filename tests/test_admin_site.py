import pytest

from core.models import History
from hospitals.models import Hospital

pytestmark = pytest.mark.django_db

CHANGELIST = "/admin/hospitals/hospital/"


def test_verify_action_goes_through_the_service(admin_client, admin_user, unverified_hospital):
    res = admin_client.post(CHANGELIST, {"action": "verify_hospitals", "_selected_action": [unverified_hospital.pk]})
    assert res.status_code == 302

    unverified_hospital.refresh_from_db()
    assert unverified_hospital.is_verified is True

    row = History.objects.get(user_type="Hospital", user_id=unverified_hospital.pk, action="verify_hospital")
    assert row.details == {
        "hospitalId": unverified_hospital.pk, "isVerified": True, "verifiedBy": admin_user.get_username(),
    }


def test_unverify_action_records_history(admin_client, hospital):
    admin_client.post(CHANGELIST, {"action": "unverify_hospitals", "_selected_action": [hospital.pk]})

    assert Hospital.objects.get(pk=hospital.pk).is_verified is False
    assert History.objects.filter(user_id=hospital.pk, action="verify_hospital").count() == 1
