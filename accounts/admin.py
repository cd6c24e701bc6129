from django import forms
from django.contrib import admin

from .models import Donor, AdminAccount


class PasswordSetForm(forms.ModelForm):
    """Admin form that hashes a new password instead of storing it raw."""
    new_password = forms.CharField(required=False, widget=forms.PasswordInput,
                                   help_text="Leave blank to keep the current password.")

    def save(self, commit=True):
        obj = super().save(commit=False)
        raw = self.cleaned_data.get("new_password")
        if raw:
            obj.set_password(raw)
        if commit:
            obj.save()
        return obj


@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    form = PasswordSetForm
    list_display = ("name", "email", "blood_group", "city", "state", "is_available", "donations", "last_donation")
    list_filter = ("blood_group", "is_available", "gender", "state")
    search_fields = ("name", "email", "phone", "city")
    exclude = ("password",)
    readonly_fields = ("last_login", "created_at", "updated_at")


@admin.register(AdminAccount)
class AdminAccountAdmin(admin.ModelAdmin):
    form = PasswordSetForm
    list_display = ("name", "email", "last_login")
    search_fields = ("name", "email")
    exclude = ("password",)
    readonly_fields = ("last_login", "created_at", "updated_at")
