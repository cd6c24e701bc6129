from django.contrib import admin

from .models import Feedback


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ("id", "user_type", "user_id", "status", "created_at", "responded_at")
    list_filter = ("status", "user_type")
    search_fields = ("description", "response_text")
    readonly_fields = ("user_id", "user_type", "created_at", "updated_at")
