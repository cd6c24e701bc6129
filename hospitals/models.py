from django.db import models
from django.utils import timezone

from accounts.models import Identity, Role


class Hospital(Identity):
    role = Role.HOSPITAL
    user_type = "Hospital"

    name = models.CharField(max_length=200)
    license_number = models.CharField(max_length=100, unique=True)
    contact_person = models.CharField(max_length=100)
    phone = models.CharField(max_length=30)

    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)

    # toggled by the platform admin
    is_verified = models.BooleanField(default=False)

    requests_made = models.PositiveIntegerField(default=0)
    requests_completed = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.license_number})"

    def save(self, *args, **kwargs):
        self.contact_person = (self.contact_person or "").strip()
        super().save(*args, **kwargs)

    @property
    def location(self):
        return f"{self.city}, {self.state}"

    def to_dict(self):
        return {
            "_id": self.pk,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "licenseNumber": self.license_number,
            "contactPerson": self.contact_person,
            "phone": self.phone,
            "city": self.city,
            "state": self.state,
            "location": self.location,
            "isVerified": self.is_verified,
            "requestsMade": self.requests_made,
            "requestsCompleted": self.requests_completed,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def to_public_dict(self):
        return {
            "_id": self.pk,
            "name": self.name,
            "location": self.location,
            "city": self.city,
            "state": self.state,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "requestsMade": self.requests_made,
            "requestsCompleted": self.requests_completed,
        }


class BloodCamp(models.Model):
    class Status(models.TextChoices):
        UPCOMING = "upcoming", "Upcoming"
        ONGOING = "ongoing", "Ongoing"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    OPEN_STATUSES = (Status.UPCOMING, Status.ONGOING)

    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name="camps")

    title = models.CharField(max_length=200)
    description = models.TextField()
    location = models.CharField(max_length=255)

    date = models.DateTimeField(db_index=True)
    time = models.CharField(max_length=50, help_text="Display time, e.g. 10:00 AM - 4:00 PM")
    contact_info = models.CharField(max_length=200)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.UPCOMING, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date"]

    def __str__(self):
        return f"{self.title} ({self.hospital.name})"

    def to_dict(self, include_donors=False):
        data = {
            "_id": self.pk,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "date": self.date.isoformat(),
            "time": self.time,
            "contactInfo": self.contact_info,
            "status": self.status,
            "createdBy": self.hospital_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_donors:
            data["interestedDonors"] = [i.to_dict() for i in self.interests.select_related("donor")]
        return data


class CampInterest(models.Model):
    class Status(models.TextChoices):
        REGISTERED = "registered", "Registered"
        ATTENDED = "attended", "Attended"
        NO_SHOW = "no-show", "No-show"

    camp = models.ForeignKey(BloodCamp, on_delete=models.CASCADE, related_name="interests")
    donor = models.ForeignKey("accounts.Donor", on_delete=models.CASCADE, related_name="camp_interests")

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.REGISTERED)
    registered_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["registered_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["camp", "donor"], name="uniq_camp_interest_camp_donor"),
        ]

    def __str__(self):
        return f"Donor#{self.donor_id} -> Camp#{self.camp_id} ({self.status})"

    def to_dict(self):
        return {
            "donor": self.donor.to_summary(),
            "status": self.status,
            "registeredAt": self.registered_at.isoformat(),
        }
