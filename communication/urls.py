from django.urls import path
from . import views

urlpatterns = [
    path("submit/", views.submit, name="feedback_submit"),
    path("history/", views.history, name="feedback_history"),
    path("responses/", views.responses, name="feedback_responses"),

    path("admin/pending/", views.admin_pending, name="feedback_admin_pending"),
    path("admin/responded/", views.admin_responded, name="feedback_admin_responded"),
    path("admin/respond/<int:feedback_id>/", views.admin_respond, name="feedback_admin_respond"),
]
