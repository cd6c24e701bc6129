from django.urls import path
from . import views

urlpatterns = [
    path("profile/", views.donor_profile, name="donor_profile"),
    path("availability/", views.donor_availability, name="donor_availability"),
    path("last-donation/", views.donor_last_donation, name="donor_last_donation"),
    path("hospitals/", views.donor_hospitals, name="donor_hospitals"),
    path("eligibility/", views.donor_eligibility, name="donor_eligibility"),
]
