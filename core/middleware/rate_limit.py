"""
Rate limiting middleware.

Implements fixed-window rate limiting per client IP for the client
license API.
"""

import hashlib
import time
from typing import Callable, Tuple

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, JsonResponse

from core.metrics import errors_total


def get_client_ip(request: HttpRequest) -> str:
    """
    Client address, honouring the first X-Forwarded-For hop.

    Args:
        request: HTTP request

    Returns:
        IP address string
    """
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "unknown")


class RateLimitMiddleware:
    """
    Rate limiting middleware per client IP.

    Counters live in the Django cache, one key per IP and window.
    Default limits: 100 requests per 15 minutes.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    @property
    def limit(self) -> int:
        return getattr(settings, "RATE_LIMIT_REQUESTS", 100)

    @property
    def window(self) -> int:
        return getattr(settings, "RATE_LIMIT_WINDOW_SECONDS", 900)

    def _get_rate_limit_key(self, client_ip: str) -> str:
        """
        Generate cache key for rate limiting.

        Args:
            client_ip: Client IP address

        Returns:
            Cache key string
        """
        ip_hash = hashlib.sha256(client_ip.encode()).hexdigest()[:16]
        return f"rate_limit:{ip_hash}"

    def _check_rate_limit(self, client_ip: str) -> Tuple[bool, int, int]:
        """
        Check if request is within rate limit.

        Args:
            client_ip: Client IP address

        Returns:
            Tuple of (is_allowed, remaining, reset_time)
        """
        limit, window = self.limit, self.window
        window_start = int(time.time() / window)
        full_key = f"{self._get_rate_limit_key(client_ip)}:{window_start}"
        reset_time = (window_start + 1) * window

        current_count = cache.get(full_key, 0)
        if current_count >= limit:
            return False, 0, reset_time

        try:
            new_count = cache.incr(full_key, 1)
        except ValueError:
            # Key doesn't exist yet
            cache.set(full_key, 1, timeout=window)
            new_count = 1

        return True, max(0, limit - new_count), reset_time

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request with rate limiting.

        Args:
            request: HTTP request

        Returns:
            HTTP response with rate limit headers
        """
        prefix = getattr(settings, "RATE_LIMIT_PATH_PREFIX", "/api/license/")
        if not request.path.startswith(prefix):
            return self.get_response(request)

        is_allowed, remaining, reset_time = self._check_rate_limit(get_client_ip(request))

        if not is_allowed:
            errors_total.labels(error_type="rate_limit_exceeded", endpoint=request.path).inc()
            response = JsonResponse(
                {
                    "error": {
                        "code": "RATE_LIMIT_EXCEEDED",
                        "message": "Too many requests, please try again later.",
                    }
                },
                status=429,
            )
        else:
            response = self.get_response(request)

        # Add rate limit headers (RFC 6585)
        response["X-RateLimit-Limit"] = str(self.limit)
        response["X-RateLimit-Remaining"] = str(remaining)
        response["X-RateLimit-Reset"] = str(reset_time)
        if not is_allowed:
            response["Retry-After"] = str(max(0, reset_time - int(time.time())))

        return response
