from django.urls import path

from . import views

urlpatterns = [
    # OTP-gated registration
    path("request-otp/", views.request_otp, name="request_otp"),
    path("verify-otp/", views.verify_otp, name="verify_otp"),
    path("register/admin/", views.register_admin, name="register_admin"),

    path("login/<str:role>/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
    path("profile/", views.profile, name="profile"),

    # Forgot password
    path("request-reset-otp/", views.request_reset_otp, name="request_reset_otp"),
    path("verify-reset-otp/", views.verify_reset_otp, name="verify_reset_otp"),
    path("reset-password/", views.reset_password, name="reset_password"),
]
