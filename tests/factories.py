from datetime import timedelta

from django.utils import timezone

from accounts.models import Donor
from hospitals.models import BloodCamp, Hospital


def make_donor(email="ravi@example.com", password="secret123", **extra):
    fields = dict(
        name="Ravi Kumar", blood_group="O+", age=30, gender="Male",
        city="Pune", state="Maharashtra", phone="9876543210",
    )
    fields.update(extra)
    donor = Donor(email=email, **fields)
    donor.set_password(password)
    donor.save()
    return donor


def make_hospital(email="city@hospital.org", license_number="LIC-001", is_verified=True, password="secret123", **extra):
    fields = dict(
        name="City Hospital", contact_person="Dr. Mehta", phone="020-5550100",
        city="Pune", state="Maharashtra",
    )
    fields.update(extra)
    hospital = Hospital(email=email, license_number=license_number, is_verified=is_verified, **fields)
    hospital.set_password(password)
    hospital.save()
    return hospital


def make_camp(hospital, date_=None, status=BloodCamp.Status.UPCOMING, **extra):
    fields = dict(
        title="Monsoon Blood Drive", description="Annual drive", location="Pune Town Hall",
        time="10:00 - 16:00", contact_info="020-5550100",
    )
    fields.update(extra)
    return BloodCamp.objects.create(
        hospital=hospital, date=date_ or timezone.now() + timedelta(days=7), status=status, **fields
    )

