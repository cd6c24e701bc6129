from django.urls import path
from . import portal

urlpatterns = [
    path("hospital/profile/", portal.hospital_profile, name="hospital_profile"),
    path("hospital/search-donors/", portal.hospital_search_donors, name="hospital_search_donors"),

    path("admin/hospitals/", portal.admin_hospitals, name="admin_hospitals"),
    path("admin/donors/", portal.admin_donors, name="admin_donors"),
    path("admin/verify-hospital/<int:hospital_id>/", portal.admin_verify_hospital, name="admin_verify_hospital"),
]
