from django.apps import apps

from core.errors import IdentityNotFound, ValidationFailed
from .models import Role

# every Role member must appear here; identity_model() is the only dispatch point
IDENTITY_MODELS = {
    Role.DONOR: "accounts.Donor",
    Role.HOSPITAL: "hospitals.Hospital",
    Role.ADMIN: "accounts.AdminAccount",
}

assert set(IDENTITY_MODELS) == set(Role), "IDENTITY_MODELS must cover every Role"


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationFailed("Invalid role", errors={"role": [f"Unknown role: {value!r}"]})


def identity_model(role):
    return apps.get_model(IDENTITY_MODELS[Role(role)])


def find_by_email(role, email):
    model = identity_model(role)
    return model.objects.filter(email=(email or "").strip().lower()).first()


def get_identity(role, identity_id):
    model = identity_model(role)
    try:
        return model.objects.get(pk=identity_id)
    except model.DoesNotExist:
        raise IdentityNotFound(f"{Role(role).label} not found")


def mask_email(email: str) -> str:
    name, _, domain = email.partition("@")
    if len(name) <= 2:
        masked = "*" * len(name)
    else:
        masked = name[0] + "*" * (len(name) - 2) + name[-1]
    return f"{masked}@{domain}"
