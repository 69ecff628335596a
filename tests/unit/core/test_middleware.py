"""
Unit tests for core middleware.
"""

import json

from django.http import HttpResponse

from core.middleware.auth import AdminAPIKeyMiddleware
from core.middleware.metrics import normalize_endpoint
from core.middleware.rate_limit import RateLimitMiddleware, get_client_ip


def _ok(request):
    return HttpResponse("ok")


class TestRateLimitMiddleware:
    """Tests for RateLimitMiddleware."""

    def test_blocks_after_limit(self, rf, settings):
        settings.RATE_LIMIT_REQUESTS = 3
        middleware = RateLimitMiddleware(_ok)

        responses = [
            middleware(rf.post("/api/license/validate", REMOTE_ADDR="10.0.0.1")) for _ in range(4)
        ]

        assert [response.status_code for response in responses] == [200, 200, 200, 429]
        assert responses[0]["X-RateLimit-Remaining"] == "2"
        assert responses[3]["X-RateLimit-Limit"] == "3"
        assert "Retry-After" in responses[3]
        assert json.loads(responses[3].content)["error"]["code"] == "RATE_LIMIT_EXCEEDED"

    def test_limits_are_per_ip(self, rf, settings):
        settings.RATE_LIMIT_REQUESTS = 1
        middleware = RateLimitMiddleware(_ok)

        first = middleware(rf.post("/api/license/validate", REMOTE_ADDR="10.0.0.1"))
        other = middleware(rf.post("/api/license/validate", REMOTE_ADDR="10.0.0.2"))

        assert first.status_code == 200
        assert other.status_code == 200

    def test_other_paths_not_limited(self, rf, settings):
        settings.RATE_LIMIT_REQUESTS = 1
        middleware = RateLimitMiddleware(_ok)

        responses = [middleware(rf.get("/health/", REMOTE_ADDR="10.0.0.1")) for _ in range(3)]

        assert all(response.status_code == 200 for response in responses)
        assert "X-RateLimit-Limit" not in responses[0]

    def test_forwarded_for(self, rf):
        request = rf.get("/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1", REMOTE_ADDR="10.0.0.1")

        assert get_client_ip(request) == "203.0.113.7"


class TestAdminAPIKeyMiddleware:
    """Tests for AdminAPIKeyMiddleware."""

    def test_ignores_client_api(self, rf):
        middleware = AdminAPIKeyMiddleware(_ok)

        assert middleware.process_request(rf.post("/api/license/validate")) is None

    def test_missing_key(self, rf):
        response = AdminAPIKeyMiddleware(_ok).process_request(rf.post("/api/admin/licenses/"))

        assert response.status_code == 401
        assert json.loads(response.content)["error"]["code"] == "MISSING_API_KEY"

    def test_invalid_key(self, rf):
        request = rf.post("/api/admin/licenses/", HTTP_X_ADMIN_KEY="wrong")

        response = AdminAPIKeyMiddleware(_ok).process_request(request)

        assert response.status_code == 401
        assert json.loads(response.content)["error"]["code"] == "INVALID_API_KEY"

    def test_valid_key(self, rf, settings):
        request = rf.post("/api/admin/licenses/", HTTP_X_ADMIN_KEY=settings.LICENSE_ADMIN_API_KEY)

        assert AdminAPIKeyMiddleware(_ok).process_request(request) is None

    def test_disabled_without_key(self, rf, settings):
        settings.LICENSE_ADMIN_API_KEY = ""

        response = AdminAPIKeyMiddleware(_ok).process_request(
            rf.post("/api/admin/licenses/", HTTP_X_ADMIN_KEY="anything")
        )

        assert response.status_code == 503


class TestNormalizeEndpoint:
    """Tests for metric endpoint labels."""

    def test_masks_license_key(self):
        assert normalize_endpoint("/api/license/status/ABCD-EFGH-JKLM-NPQR") == (
            "/api/license/status/{license_key}"
        )

    def test_masks_uuid(self):
        assert normalize_endpoint("/admin/licenses/0f8fad5b-d9cb-469f-a165-70867728950e/") == (
            "/admin/licenses/{id}/"
        )
