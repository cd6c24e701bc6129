import re

from django import forms

from hospitals.models import Hospital
from .models import Donor, AdminAccount, Role

PHONE_RE = re.compile(r"^[0-9+\-\s]{7,20}$")


def _clean_phone(value):
    p = (value or "").strip()
    if p and not PHONE_RE.match(p):
        raise forms.ValidationError("Enter a valid phone number.")
    return p


class OtpRequestForm(forms.Form):
    email = forms.EmailField()
    role = forms.ChoiceField(choices=Role.choices)


class OtpVerifyForm(forms.Form):
    email = forms.EmailField()
    code = forms.RegexField(regex=r"^\d{6}$", error_messages={"invalid": "Code must be 6 digits."})


class PasswordResetForm(forms.Form):
    email = forms.EmailField()
    role = forms.ChoiceField(choices=[(Role.DONOR, "Donor"), (Role.HOSPITAL, "Hospital")])
    new_password = forms.CharField(min_length=6)


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField()


class DonorRegistrationForm(forms.ModelForm):
    """Pending donor payload carried by a registration passcode."""
    password = forms.CharField(min_length=6)

    class Meta:
        model = Donor
        fields = ["name", "blood_group", "age", "gender", "city", "state", "phone", "last_donation"]

    def clean_phone(self):
        return _clean_phone(self.cleaned_data.get("phone"))

    def validate_unique(self):
        # duplicates are reported by the OTP broker as DuplicateIdentity
        pass


class HospitalRegistrationForm(forms.ModelForm):
    password = forms.CharField(min_length=6)

    class Meta:
        model = Hospital
        fields = ["name", "license_number", "contact_person", "phone", "city", "state"]

    def clean_license_number(self):
        return (self.cleaned_data.get("license_number") or "").strip()

    def clean_phone(self):
        return _clean_phone(self.cleaned_data.get("phone"))

    def validate_unique(self):
        pass


REGISTRATION_FORMS = {
    Role.DONOR: DonorRegistrationForm,
    Role.HOSPITAL: HospitalRegistrationForm,
}


class AdminRegistrationForm(forms.ModelForm):
    password = forms.CharField(min_length=6)

    class Meta:
        model = AdminAccount
        fields = ["name", "email"]

    def save(self, commit=True):
        admin = super().save(commit=False)
        admin.set_password(self.cleaned_data["password"])
        if commit:
            admin.save()
        return admin


class DonorProfileForm(forms.ModelForm):
    class Meta:
        model = Donor
        fields = ["name", "blood_group", "age", "gender", "city", "state", "phone", "is_available"]

    def clean_phone(self):
        return _clean_phone(self.cleaned_data.get("phone"))


class AvailabilityForm(forms.Form):
    is_available = forms.BooleanField(required=False)


class LastDonationForm(forms.Form):
    last_donation = forms.DateField()
