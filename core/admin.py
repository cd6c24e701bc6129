from django.contrib import admin
from .models import History


@admin.register(History)
class HistoryAdmin(admin.ModelAdmin):
    list_display = ("user_type", "user_id", "action", "date")
    list_filter = ("user_type", "action")
    search_fields = ("action",)

    # audit rows are written by the app only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
