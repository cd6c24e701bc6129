from django.contrib import admin, messages

from accounts.admin import PasswordSetForm
from .models import Hospital, BloodCamp, CampInterest
from .services import set_hospital_verified, sweep_camp_statuses


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    form = PasswordSetForm
    list_display = ("name", "license_number", "city", "state", "is_verified", "created_at")
    list_filter = ("is_verified", "state")
    search_fields = ("name", "email", "license_number", "phone")
    exclude = ("password",)
    readonly_fields = ("last_login", "created_at", "updated_at")
    actions = ["verify_hospitals", "unverify_hospitals"]

    def _apply_verified(self, request, hospital, value):
        set_hospital_verified(hospital.pk, is_verified=value, staff_username=request.user.get_username())

    def verify_hospitals(self, request, queryset):
        n = 0
        for hospital in queryset.filter(is_verified=False):
            self._apply_verified(request, hospital, True)
            n += 1
        self.message_user(request, f"{n} hospital(s) verified.", level=messages.SUCCESS)
    verify_hospitals.short_description = "Verify selected hospitals"

    def unverify_hospitals(self, request, queryset):
        n = 0
        for hospital in queryset.filter(is_verified=True):
            self._apply_verified(request, hospital, False)
            n += 1
        self.message_user(request, f"{n} hospital(s) unverified.", level=messages.WARNING)
    unverify_hospitals.short_description = "Revoke verification of selected hospitals"


class CampInterestInline(admin.TabularInline):
    model = CampInterest
    extra = 0
    raw_id_fields = ("donor",)
    readonly_fields = ("registered_at",)


@admin.register(BloodCamp)
class BloodCampAdmin(admin.ModelAdmin):
    list_display = ("title", "hospital", "location", "date", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "location", "hospital__name")
    date_hierarchy = "date"
    inlines = [CampInterestInline]
    actions = ["complete_past_camps"]

    def complete_past_camps(self, request, queryset):
        updated = sweep_camp_statuses()
        self.message_user(request, f"Marked {updated} past camp(s) as completed.", level=messages.SUCCESS)
    complete_past_camps.short_description = "Run the past-camp sweep now"
