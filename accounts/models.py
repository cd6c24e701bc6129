from django.contrib.auth.hashers import make_password, check_password
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone


class Role(models.TextChoices):
    DONOR = "donor", "Donor"
    HOSPITAL = "hospital", "Hospital"
    ADMIN = "admin", "Admin"


BLOOD_GROUPS = (
    ('A+', 'A+'), ('A-', 'A-'),
    ('B+', 'B+'), ('B-', 'B-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'),
    ('O+', 'O+'), ('O-', 'O-'),
)


class Identity(models.Model):
    """
    Fields shared by every account kind (donor, hospital, admin).
    Email is unique per kind, not across kinds.
    """
    role = None
    user_type = None

    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)

    last_login = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.email = (self.email or "").strip().lower()
        super().save(*args, **kwargs)

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password) -> bool:
        return check_password(raw_password, self.password)

    def touch_login(self):
        self.last_login = timezone.now()
        self.save(update_fields=["last_login"])


class Donor(Identity):
    GENDERS = [("Male", "Male"), ("Female", "Female"), ("Other", "Other")]

    role = Role.DONOR
    user_type = "Donor"

    name = models.CharField(max_length=100)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUPS)
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(18), MaxValueValidator(65)])
    gender = models.CharField(max_length=6, choices=GENDERS)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    phone = models.CharField(max_length=20)

    is_available = models.BooleanField(default=True)
    donations = models.PositiveIntegerField(default=0)
    last_donation = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["blood_group", "is_available"], name="donor_group_available_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.blood_group})"

    def to_dict(self):
        return {
            "_id": self.pk,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "bloodGroup": self.blood_group,
            "age": self.age,
            "gender": self.gender,
            "city": self.city,
            "state": self.state,
            "phone": self.phone,
            "isAvailable": self.is_available,
            "donations": self.donations,
            "lastDonation": self.last_donation.isoformat() if self.last_donation else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def to_summary(self):
        return {
            "_id": self.pk,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "bloodGroup": self.blood_group,
            "city": self.city,
            "state": self.state,
        }


class AdminAccount(Identity):
    role = Role.ADMIN
    user_type = "Admin"

    name = models.CharField(max_length=100)

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def to_dict(self):
        return {
            "_id": self.pk,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "isVerified": True,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }
