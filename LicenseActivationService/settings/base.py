"""
Base Django settings for LicenseActivationService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-3n#v8r!q0l@x7m2k$w5p^t9z&c4j(f6h)b1y*e_d-s+a=g%u"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "LicenseActivationService.apps.LicenseActivationServiceConfig",
    "core",
    "customers",
    "products",
    "licenses",
    "activations",
    "audit",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.rate_limit.RateLimitMiddleware",
    "core.middleware.auth.AdminAPIKeyMiddleware",
]

ROOT_URLCONF = "LicenseActivationService.urls"

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

WSGI_APPLICATION = "LicenseActivationService.wsgi.application"

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
LICENSE_DB_STATEMENT_TIMEOUT_MS = int(os.environ.get("LICENSE_DB_STATEMENT_TIMEOUT_MS", "5000"))

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_service"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
            # Bounds every statement, including lock waits on the license row
            "options": f"-c statement_timeout={LICENSE_DB_STATEMENT_TIMEOUT_MS}",
        },
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Activation Service API",
    "DESCRIPTION": (
        "Issues, validates and tracks activation of software license keys. "
        "Client endpoints validate and release machine activations; "
        "admin endpoints issue licenses and manage their lifecycle."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api",
    "TAGS": [
        {"name": "License API", "description": "Client-facing validation and activation"},
        {"name": "Admin API", "description": "License issuance and lifecycle management"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# License engine
LICENSE_SIGNING_KEY = os.environ.get("LICENSE_SIGNING_KEY", SECRET_KEY)
LICENSE_ATTESTATION_ALGORITHM = "HS256"
LICENSE_ATTESTATION_TTL_SECONDS = int(os.environ.get("LICENSE_ATTESTATION_TTL_SECONDS", "3600"))
LICENSE_TIMESTAMP_TOLERANCE_SECONDS = int(
    os.environ.get("LICENSE_TIMESTAMP_TOLERANCE_SECONDS", "300")
)
LICENSE_AUDIT_UNKNOWN_KEYS = (
    os.environ.get("LICENSE_AUDIT_UNKNOWN_KEYS", "false").lower() == "true"
)

# Admin API
ADMIN_API_KEY_HEADER = "X-Admin-Key"
LICENSE_ADMIN_API_KEY = os.environ.get("LICENSE_ADMIN_API_KEY", "")

# Rate limiting (per client IP, client API only)
RATE_LIMIT_REQUESTS = int(os.environ.get("RATE_LIMIT_REQUESTS", "100"))
RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", "900"))
RATE_LIMIT_PATH_PREFIX = "/api/license/"

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
