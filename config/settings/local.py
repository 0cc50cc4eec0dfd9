# config/settings/local.py
from .base import *  # noqa

DEBUG = True

# No SMTP credentials in dev: print mail to the console.
if not EMAIL_PROVIDERS:
    EMAIL_PROVIDERS = [
        {
            "name": "console",
            "backend": "django.core.mail.backends.console.EmailBackend",
            "from_email": DEFAULT_FROM_EMAIL,
            "options": {},
        },
    ]
