# config/settings/test.py
import tempfile
from pathlib import Path

from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix="brgy-media-"))

EMAIL_PROVIDERS = [
    {
        "name": "sendgrid",
        "backend": "django.core.mail.backends.locmem.EmailBackend",
        "from_email": "no-reply@test.local",
        "options": {},
    },
    {
        "name": "gmail",
        "backend": "django.core.mail.backends.locmem.EmailBackend",
        "from_email": "fallback@test.local",
        "options": {},
    },
]

LOGGING["root"]["level"] = "WARNING"
LOGGING["loggers"]["brgy_core"]["level"] = "WARNING"
