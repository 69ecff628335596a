"""
Admin API key authentication middleware.

This middleware guards the administrative license API with a shared key
taken from settings.
"""

import hashlib
import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/api/admin/"


class AdminAPIKeyMiddleware(MiddlewareMixin):
    """
    Middleware for admin API key authentication.

    This middleware:
    1. Leaves every path outside /api/admin/ alone
    2. Returns 503 when no admin key is configured
    3. Returns 401 Unauthorized if the X-Admin-Key header does not match
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401/503 if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_API_PREFIX):
            return None

        expected = getattr(settings, "LICENSE_ADMIN_API_KEY", "")
        if not expected:
            return JsonResponse(
                {"error": {"code": "ADMIN_API_DISABLED", "message": "Admin API is not configured"}},
                status=503,
            )

        header = getattr(settings, "ADMIN_API_KEY_HEADER", "X-Admin-Key")
        provided = request.headers.get(header, "")
        if not provided:
            return JsonResponse(
                {
                    "error": {
                        "code": "MISSING_API_KEY",
                        "message": f"Missing admin key. Provide {header} header.",
                    }
                },
                status=401,
            )

        # Compare digests so the comparison time does not depend on the key
        provided_hash = hashlib.sha256(provided.encode()).hexdigest()
        expected_hash = hashlib.sha256(expected.encode()).hexdigest()
        if not hmac.compare_digest(provided_hash, expected_hash):
            logger.warning("Invalid admin key attempted", extra={"path": request.path})
            return JsonResponse(
                {"error": {"code": "INVALID_API_KEY", "message": "Invalid admin key"}},
                status=401,
            )

        return None
