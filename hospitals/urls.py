from django.urls import path
from . import views

urlpatterns = [
    path("", views.camp_create, name="camp_create"),
    path("public/", views.camp_public_list, name="camp_public_list"),
    path("hospital/", views.camp_hospital_list, name="camp_hospital_list"),
    path("donor/", views.camp_donor_list, name="camp_donor_list"),
    path("admin/", views.camp_admin_list, name="camp_admin_list"),
    path("admin/update-status/", views.camp_sweep, name="camp_sweep"),
    path("stats/", views.camp_stats, name="camp_stats"),

    path("<int:camp_id>/", views.camp_detail, name="camp_detail"),
    path("<int:camp_id>/cancel/", views.camp_cancel, name="camp_cancel"),
    path("<int:camp_id>/status/", views.camp_status, name="camp_status"),
    path("<int:camp_id>/interest/", views.camp_interest, name="camp_interest"),
    path("<int:camp_id>/attendance/<int:donor_id>/", views.camp_attendance, name="camp_attendance"),
]
