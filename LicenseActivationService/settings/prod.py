"""
Production settings for LicenseActivationService.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = False

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(",")

# Security settings
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_BROWSER_XSS_FILTER = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Signing key must be set explicitly in production
LICENSE_SIGNING_KEY = os.environ["LICENSE_SIGNING_KEY"]

# Logging in production
LOGGING = get_logging_config("production")
LOGGING["root"]["handlers"].append("file")
