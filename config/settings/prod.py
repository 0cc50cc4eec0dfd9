# config/settings/prod.py
import os

from .base import *  # noqa

DEBUG = False

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = [o for o in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",") if o]
CORS_ALLOW_CREDENTIALS = True

SIMPLE_JWT["AUTH_COOKIE_SECURE"] = True
SIMPLE_JWT["AUTH_COOKIE_SAMESITE"] = "Lax"  # keep Lax if same-site via subdomain strategy

# Object storage (S3-compatible bucket)
STORAGES["default"] = {
    "BACKEND": "storages.backends.s3.S3Storage",
    "OPTIONS": {
        "bucket_name": os.getenv("STORAGE_BUCKET", "brgy-portal"),
        "endpoint_url": os.getenv("STORAGE_ENDPOINT_URL") or None,
        "region_name": os.getenv("STORAGE_REGION") or None,
        "access_key": os.getenv("STORAGE_ACCESS_KEY_ID"),
        "secret_key": os.getenv("STORAGE_SECRET_ACCESS_KEY"),
        "default_acl": "private",
        "querystring_auth": True,
        "querystring_expire": PORTAL["SIGNED_URL_TTL_SECONDS"],
        "file_overwrite": False,
    },
}

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
