from core.api import api_view, json_body, snake_keys, validated
from core.errors import ValidationFailed
from core.history import record
from .forms import (
    OtpRequestForm, OtpVerifyForm, PasswordResetForm, LoginForm,
    AdminRegistrationForm, REGISTRATION_FORMS,
)
from .identity import parse_role, mask_email
from .models import Role
from .otp import OtpBroker, PURPOSE_REGISTRATION, PURPOSE_RESET
from .permissions import session_required
from . import services


def get_broker():
    return OtpBroker()


@api_view("POST")
def request_otp(request):
    """
    Step 1 of registration: validate the pending account and email a code.
    Body: {email, role, userData: {...}}
    """
    body = json_body(request)
    head = validated(OtpRequestForm({"email": body.get("email"), "role": body.get("role")}))
    role = Role(head["role"])

    form_class = REGISTRATION_FORMS.get(role)
    if form_class is None:
        raise ValidationFailed("Invalid role for OTP registration")
    user_data = body.get("userData") or {}
    if not isinstance(user_data, dict):
        raise ValidationFailed("userData must be a JSON object", errors={"userData": ["Expected an object."]})
    pending = validated(form_class(snake_keys(user_data)))

    get_broker().request_code(head["email"], PURPOSE_REGISTRATION, role, payload=dict(pending))
    return {"message": "OTP sent successfully"}


@api_view("POST")
def verify_otp(request):
    """Step 2 of registration: redeem the code, create the account, sign in."""
    data = validated(OtpVerifyForm(json_body(request)))
    identity, token = get_broker().verify_code(data["email"], data["code"], PURPOSE_REGISTRATION)
    return {
        "message": "User verified and registered successfully",
        "user": identity.to_dict(),
        "token": token,
    }


@api_view("POST")
def register_admin(request):
    form = AdminRegistrationForm(json_body(request))
    validated(form)
    admin, token = services.register_first_admin(form)
    return {"admin": admin.to_dict(), "token": token}, 201


@api_view("POST")
def login_view(request, role):
    role = parse_role(role)
    data = validated(LoginForm(json_body(request)))
    identity, token = services.login(role, data["email"], data["password"])
    return {"message": "Login successful", role.value: identity.to_dict(), "token": token}


@api_view("POST")
def request_reset_otp(request):
    body = json_body(request)
    data = validated(OtpRequestForm({"email": body.get("email"), "role": body.get("role")}))
    role = Role(data["role"])
    if role == Role.ADMIN:
        raise ValidationFailed("Invalid role")

    get_broker().request_code(data["email"], PURPOSE_RESET, role)
    return {"message": "OTP sent successfully", "maskedEmail": mask_email(data["email"].lower())}


@api_view("POST")
def verify_reset_otp(request):
    data = validated(OtpVerifyForm(json_body(request)))
    get_broker().verify_code(data["email"], data["code"], PURPOSE_RESET)
    return {"message": "OTP verified"}


@api_view("POST")
def reset_password(request):
    data = validated(PasswordResetForm(snake_keys(json_body(request))))
    get_broker().reset_password(data["email"], data["role"], data["new_password"])
    return {"message": "Password reset successful"}


@api_view("POST")
@session_required()
def logout_view(request):
    # sessions are stateless; the client discards its token
    record(request.identity, "logout", email=request.identity.email)
    return {"message": "Logout recorded in history."}


@api_view("GET")
@session_required()
def profile(request):
    return request.identity.to_dict()
