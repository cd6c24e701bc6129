from config.settings import *  # noqa: F401,F403

SECRET_KEY = "test-secret-key"
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# fast hashing in tests; bcrypt stays the production default
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "tests-default",
    },
    "otp": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "tests-otp",
    },
}

OTP_TTL_SECONDS = 60
OTP_RESET_WINDOW_SECONDS = 600
OTP_RESEND_INTERVAL_SECONDS = 0
SESSION_TTL_SECONDS = 60 * 60 * 24
CAMP_COMPLETION_GRACE_HOURS = 24
