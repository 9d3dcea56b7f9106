from decimal import Decimal
from pathlib import Path

from corsheaders.defaults import default_headers
from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = config("SECRET_KEY", default="django-insecure-change-me")
DEBUG = config("DEBUG", default=False, cast=bool)
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1,testserver", cast=Csv())

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "corsheaders",
    "chama",
    "notification",
    "wallet",
    "payments",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "chamawallet.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "chamawallet.wsgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": config("DB_ENGINE", default="django.db.backends.sqlite3"),
        "NAME": config("DB_NAME", default=str(BASE_DIR / "db.sqlite3")),
        "USER": config("DB_USER", default=""),
        "PASSWORD": config("DB_PASSWORD", default=""),
        "HOST": config("DB_HOST", default=""),
        "PORT": config("DB_PORT", default=""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "chamawallet",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Africa/Nairobi"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
LOGIN_URL = "/admin/login/"

# CORS (payment endpoints only)
CORS_ALLOW_ALL_ORIGINS = True
CORS_URLS_REGEX = r"^/api/payments/.*$"
CORS_ALLOW_HEADERS = (
    *default_headers,
    "apikey",
    "x-client-info",
    "x-paystack-signature",
)

# Paystack
PAYSTACK_SECRET_KEY = config("PAYSTACK_SECRET_KEY", default="")
PAYSTACK_BASE_URL = config("PAYSTACK_BASE_URL", default="https://api.paystack.co")
PAYSTACK_CALLBACK_URL = config("PAYSTACK_CALLBACK_URL", default="")
PAYSTACK_TIMEOUT_SECONDS = config("PAYSTACK_TIMEOUT_SECONDS", default=30, cast=int)

# Wallet / reconciliation
DEFAULT_CURRENCY = config("DEFAULT_CURRENCY", default="KES")
PLATFORM_FEE_RATE = config("PLATFORM_FEE_RATE", default="0.025", cast=Decimal)
STUCK_PAYMENT_THRESHOLD_SECONDS = config("STUCK_PAYMENT_THRESHOLD_SECONDS", default=300, cast=int)
STUCK_PAYMENT_POLL_INTERVAL_SECONDS = config("STUCK_PAYMENT_POLL_INTERVAL_SECONDS", default=30, cast=int)
PAYMENTS_IDEMPOTENT_CREDIT = config("PAYMENTS_IDEMPOTENT_CREDIT", default=False, cast=bool)
PAYMENTS_SERVICE_TOKEN = config("PAYMENTS_SERVICE_TOKEN", default="")
PAYMENTS_MANUAL_CREDIT_URL = config(
    "PAYMENTS_MANUAL_CREDIT_URL",
    default="http://localhost:8000/api/payments/manual-credit/",
)

# Logging
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
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
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "payments": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "wallet": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "chama": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "notification": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
