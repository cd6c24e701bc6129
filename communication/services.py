import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import send_mail

from core.errors import DeliveryFailure

logger = logging.getLogger(__name__)


def send_code_email(address, code, ttl_seconds=None):
    """
    Deliver a one-time passcode by email.
    Any transport failure is raised as DeliveryFailure.
    """
    ttl = ttl_seconds or int(getattr(settings, "OTP_TTL_SECONDS", 60))
    subject = "RaktSetu - Email Verification Code"
    body = (
        f"Your verification code is {code}. It will expire in {ttl} seconds.\n\n"
        f"If you did not request this code, you can ignore this email.\n\n"
        f"RaktSetu Team"
    )
    html = f"<p>Your verification code is <b>{code}</b>. It will expire in {ttl} seconds.</p>"

    try:
        sent = send_mail(
            subject,
            body,
            settings.DEFAULT_FROM_EMAIL,
            [address],
            fail_silently=False,
            html_message=html,
        )
    except (SMTPException, OSError) as e:
        logger.error("Code delivery to %s failed: %s", address, e)
        raise DeliveryFailure() from e

    if not sent:
        logger.error("Code delivery to %s was not accepted by the mail backend", address)
        raise DeliveryFailure()
    return True


def send_notice_email(address, subject, body):
    """Best-effort informational email (verification outcome, feedback reply)."""
    if not address:
        return False
    try:
        return bool(send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [address], fail_silently=False))
    except (SMTPException, OSError) as e:
        logger.warning("Notice email to %s failed: %s", address, e)
        return False
