# config/settings/base.py
from pathlib import Path
import os
from dotenv import load_dotenv
from datetime import timedelta


BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "unsafe-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = [h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h]

INSTALLED_APPS = [
    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "corsheaders",
    "rest_framework",
    "rest_framework_simplejwt",
    "drf_spectacular",
    "django_filters",

    # Domain apps (modular monolith)
    "brgy_core.common.apps.CommonConfig",
    "brgy_core.iam.apps.IamConfig",
    "brgy_core.audit.apps.AuditConfig",
    "brgy_core.notifications.apps.NotificationsConfig",
    "brgy_core.documents.apps.DocumentsConfig",
    "brgy_core.health.apps.HealthConfig",
    "brgy_core.daycare.apps.DaycareConfig",
    "brgy_core.certificates.apps.CertificatesConfig",
    "brgy_core.events.apps.EventsConfig",
    "brgy_core.reports.apps.ReportsConfig",
    "brgy_core.cms.apps.CmsConfig",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",

    # request_id + access log
    "brgy_core.common.middleware.RequestLogMiddleware",

    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]


ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME", "brgy"),
        "USER": os.getenv("DB_USER", "brgy"),
        "PASSWORD": os.getenv("DB_PASSWORD", "brgy"),
        "HOST": os.getenv("DB_HOST", "127.0.0.1"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Asia/Manila"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
MEDIA_URL = "media/"
MEDIA_ROOT = Path(os.getenv("MEDIA_ROOT", str(BASE_DIR / "media")))
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Uploads handled by brgy_core.common.storage
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}
DATA_UPLOAD_MAX_MEMORY_SIZE = 30 * 1024 * 1024

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "brgy_core.iam.auth.CookieOrHeaderJWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",

    # Standard error envelope
    "EXCEPTION_HANDLER": "brgy_core.common.api.exceptions.api_exception_handler",

    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.OrderingFilter",
        "rest_framework.filters.SearchFilter",
    ],

    "DEFAULT_PAGINATION_CLASS": "brgy_core.common.api.pagination.DefaultPagination",
    "PAGE_SIZE": 20,  # DefaultPagination reads PORTAL["PAGE_SIZE"]

    # ?format=pdf|xlsx selects export formats, not renderers
    "URL_FORMAT_OVERRIDE": None,
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Barangay Portal API",
    "DESCRIPTION": "Residents, daycare, health, SK events, certificates and reports",
    "VERSION": "0.1.0",

    "COMPONENT_SPLIT_REQUEST": True,
    "SORT_OPERATIONS": True,
    "SORT_OPERATION_PARAMETERS": True,

    # Declared by CookieOrHeaderJWTAuthenticationScheme (brgy_core/iam/openapi.py)
    "SECURITY": [
        {"BearerOrCookieJWT": []}
    ],

    # Remove legacy /api/* endpoints, keep /api/v1/*
    "PREPROCESSING_HOOKS": [
        "brgy_core.common.spectacular_hooks.preprocess_exclude_legacy_api",
    ],
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=int(os.getenv("JWT_ACCESS_MINUTES", "30"))),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=int(os.getenv("JWT_REFRESH_DAYS", "7"))),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": False,
    "UPDATE_LAST_LOGIN": True,

    # Cookie settings
    "AUTH_COOKIE": "brgy_access",
    "AUTH_COOKIE_REFRESH": "brgy_refresh",
    "AUTH_COOKIE_SECURE": False,   # set True in production (HTTPS)
    "AUTH_COOKIE_HTTP_ONLY": True,
    "AUTH_COOKIE_SAMESITE": "Lax",
}

# CORS settings
CORS_ALLOW_ALL_ORIGINS = True  # Only for development!
CORS_ALLOW_CREDENTIALS = True

# ---------------------------------------------------------
# Portal
# ---------------------------------------------------------

PORTAL = {
    "NAME": os.getenv("PORTAL_NAME", "Gabay Barangay"),
    "BARANGAY_NAME": os.getenv("BARANGAY_NAME", "Barangay Binitayan"),
    "BARANGAY_ADDRESS": os.getenv("BARANGAY_ADDRESS", "Daraga, Albay, Philippines"),
    "BARANGAY_CAPTAIN": os.getenv("BARANGAY_CAPTAIN", "Juan Dela Cruz"),
    "OFFICE_HOURS": "Mon - Fri: 8am - 5pm, Sat: 8am - 12pm",
    "RESET_CODE_TTL_MINUTES": 15,
    "LOGIN_OTP_TTL_MINUTES": 10,
    "MAX_CODE_ATTEMPTS": 5,
    "SIGNED_URL_TTL_SECONDS": 3600,
    "PROOF_OF_RESIDENCY_MAX_BYTES": 5 * 1024 * 1024,
    "LEARNING_MATERIAL_MAX_BYTES": 25 * 1024 * 1024,
    "PAGE_SIZE": int(os.getenv("PAGE_SIZE", "20")),
    "MAX_PAGE_SIZE": 200,
}

# ---------------------------------------------------------
# EMAIL: primary provider first, then fallbacks in order
# ---------------------------------------------------------

DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "no-reply@gabaybarangay.ph")

EMAIL_PROVIDERS = [
    {
        "name": "sendgrid",
        "enabled": bool(os.getenv("SENDGRID_API_KEY")),
        "backend": "django.core.mail.backends.smtp.EmailBackend",
        "from_email": os.getenv("SENDGRID_FROM_EMAIL", DEFAULT_FROM_EMAIL),
        "options": {
            "host": "smtp.sendgrid.net",
            "port": 587,
            "username": "apikey",
            "password": os.getenv("SENDGRID_API_KEY", ""),
            "use_tls": True,
            "timeout": 15,
        },
    },
    {
        "name": "gmail",
        "enabled": bool(os.getenv("GMAIL_USER") and os.getenv("GMAIL_APP_PASSWORD")),
        "backend": "django.core.mail.backends.smtp.EmailBackend",
        "from_email": os.getenv("GMAIL_USER", DEFAULT_FROM_EMAIL),
        "options": {
            "host": "smtp.gmail.com",
            "port": 587,
            "username": os.getenv("GMAIL_USER", ""),
            "password": os.getenv("GMAIL_APP_PASSWORD", ""),
            "use_tls": True,
            "timeout": 15,
        },
    },
]
EMAIL_PROVIDERS = [p for p in EMAIL_PROVIDERS if p.pop("enabled", True)]

# ---------------------------------------------------------
# LOGGING
# ---------------------------------------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_HANDLERS = ["console"]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {name} {process:d} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": LOG_HANDLERS,
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": LOG_HANDLERS,
            "level": "WARNING",
            "propagate": False,
        },
        "brgy_core": {
            "handlers": LOG_HANDLERS,
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

if os.getenv("LOG_TO_FILE", "0") == "1":
    (BASE_DIR / "logs").mkdir(exist_ok=True)
    LOGGING["handlers"]["file"] = {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": BASE_DIR / "logs" / "portal.log",
        "maxBytes": 10485760,  # 10 MB
        "backupCount": 5,
        "formatter": "verbose",
    }
    for _logger in [LOGGING["root"], *LOGGING["loggers"].values()]:
        _logger["handlers"] = [*_logger["handlers"], "file"]
