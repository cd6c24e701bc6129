"""
Domain errors shared by every app.

Each error carries the HTTP status it maps to and a stable machine code, so
views never have to translate failures by hand: ``core.api.api_view`` turns
any ``PlatformError`` into a JSON response.
"""


class PlatformError(Exception):
    status_code = 400
    code = "error"
    default_message = "Request could not be processed."

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def as_dict(self):
        data = {"message": self.message, "code": self.code}
        data.update(self.extra)
        return data


class ValidationFailed(PlatformError):
    code = "validation_failed"
    default_message = "Invalid input."

    def __init__(self, message=None, errors=None):
        super().__init__(message, errors=errors or {})


# ---------------- identity / OTP ----------------
class DuplicateIdentity(PlatformError):
    code = "duplicate_identity"

    def __init__(self, field):
        label = "license number" if field == "license_number" else field
        super().__init__(f"This {label} is already registered", field=field)
        self.field = field


class CodeExpired(PlatformError):
    code = "code_expired"
    default_message = "OTP expired"


class CodeMismatch(PlatformError):
    code = "code_mismatch"
    default_message = "Invalid OTP"


class CodeRequestTooSoon(PlatformError):
    status_code = 429
    code = "code_request_too_soon"
    default_message = "Please wait before requesting another code."


class ResetNotVerified(PlatformError):
    code = "reset_not_verified"
    default_message = "OTP verification required"


class DeliveryFailure(PlatformError):
    status_code = 503
    code = "delivery_failure"
    default_message = "Could not send the verification code. Please try again."


class InvalidCredentials(PlatformError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid credentials"


# ---------------- sessions ----------------
class MissingToken(PlatformError):
    status_code = 401
    code = "missing_token"
    default_message = "No authentication token, access denied"


class InvalidToken(PlatformError):
    status_code = 401
    code = "invalid_token"
    default_message = "Invalid token"


class ExpiredToken(PlatformError):
    status_code = 401
    code = "expired_token"
    default_message = "Token has expired"


class Forbidden(PlatformError):
    status_code = 403
    code = "forbidden"
    default_message = "Access denied"


class NotVerified(PlatformError):
    status_code = 403
    code = "not_verified"
    default_message = "Hospital not verified"


# ---------------- lookups ----------------
class NotFound(PlatformError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class IdentityNotFound(NotFound):
    code = "identity_not_found"
    default_message = "User not found"


class CampNotFound(NotFound):
    code = "camp_not_found"
    default_message = "Blood camp not found"


class InterestNotFound(NotFound):
    code = "interest_not_found"
    default_message = "Donor not registered for this blood camp"


class FeedbackNotFound(NotFound):
    code = "feedback_not_found"
    default_message = "Feedback not found"


# ---------------- camp ledger ----------------
class AlreadyRegistered(PlatformError):
    code = "already_registered"
    default_message = "You are already registered for this blood camp"


class NotRegistered(PlatformError):
    code = "not_registered"
    default_message = "You are not registered for this blood camp"


class CampClosed(PlatformError):
    code = "camp_closed"
    default_message = "This blood camp is no longer open"


# ---------------- feedback ----------------
class AlreadyResponded(PlatformError):
    code = "already_responded"
    default_message = "This feedback has already been responded to"
