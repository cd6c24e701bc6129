import re

from django import forms

from .models import Hospital, BloodCamp

PHONE_RE = re.compile(r"^[0-9+\-\s]{7,20}$")


class BloodCampForm(forms.ModelForm):
    class Meta:
        model = BloodCamp
        fields = ["title", "description", "location", "date", "time", "contact_info"]

    def clean_title(self):
        t = (self.cleaned_data.get("title") or "").strip()
        if not t:
            raise forms.ValidationError("Title is required.")
        return t

    def clean_location(self):
        return (self.cleaned_data.get("location") or "").strip()


class HospitalProfileForm(forms.ModelForm):
    class Meta:
        model = Hospital
        fields = ["name", "contact_person", "phone", "city", "state"]

    def clean_phone(self):
        p = (self.cleaned_data.get("phone") or "").strip()
        if p and not PHONE_RE.match(p):
            raise forms.ValidationError("Enter a valid phone number.")
        return p


class CampStatusForm(forms.Form):
    status = forms.ChoiceField(choices=BloodCamp.Status.choices)


class AttendanceForm(forms.Form):
    status = forms.CharField()


class VerifyHospitalForm(forms.Form):
    is_verified = forms.BooleanField(required=False)
