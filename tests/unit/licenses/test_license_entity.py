"""
Unit tests for License domain entity.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import InvalidExpiryError, InvalidLicenseStatusError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.domain.services import LicenseStateEvaluator


def _license(expires_at=None, max_activations=2):
    return License.create(
        product_id=uuid.uuid4(),
        customer_id=uuid.uuid4(),
        max_activations=max_activations,
        expires_at=expires_at,
    )


class TestLicenseEntity:
    """Tests for License domain entity."""

    def test_create_license(self):
        """Test creating a license entity."""
        product_id = uuid.uuid4()
        customer_id = uuid.uuid4()
        expires_at = datetime.now(timezone.utc) + timedelta(days=365)

        license = License.create(
            product_id=product_id,
            customer_id=customer_id,
            max_activations=5,
            expires_at=expires_at,
            features=["export", "sync"],
        )

        assert license.product_id == product_id
        assert license.customer_id == customer_id
        assert license.status == LicenseStatus.ACTIVE
        assert license.max_activations == 5
        assert license.current_activations == 0
        assert license.features == frozenset({"export", "sync"})
        assert license.expires_at == expires_at

    def test_create_license_defaults(self):
        """Test creating license with default activation limit."""
        license = License.create(product_id=uuid.uuid4(), customer_id=uuid.uuid4())

        assert license.max_activations == 1
        assert license.is_perpetual is True
        assert license.metadata == {}

    def test_id_is_not_derived_from_key(self):
        """Test the record id and the license key are independent."""
        license = _license()

        assert license.license_key not in str(license.id)

    def test_rejects_zero_max_activations(self):
        """Test a license needs at least one activation slot."""
        with pytest.raises(ValueError, match="Max activations"):
            _license(max_activations=0)

    def test_rejects_malformed_key(self):
        """Test a license key must have the XXXX-XXXX-XXXX-XXXX format."""
        with pytest.raises(ValueError, match="Invalid license key format"):
            License.create(
                product_id=uuid.uuid4(),
                customer_id=uuid.uuid4(),
                license_key="abcd-1234",
            )

    def test_is_valid_active_license(self):
        """Test is_valid for an active license."""
        license = _license(datetime.now(timezone.utc) + timedelta(days=365))

        assert license.is_valid() is True

    def test_is_valid_perpetual_license(self):
        """Test a perpetual license never expires."""
        license = _license()

        assert license.is_valid(datetime(2999, 1, 1, tzinfo=timezone.utc)) is True

    def test_expiry_boundary(self):
        """Test a license is expired exactly at its expiry instant."""
        expires_at = datetime(2030, 1, 1, tzinfo=timezone.utc)
        license = _license(expires_at)

        assert license.is_valid(expires_at - timedelta(seconds=1)) is True
        assert license.is_valid(expires_at) is False
        assert license.invalid_reason(expires_at + timedelta(seconds=1)) == "License has expired"

    def test_suspended_license_reason(self):
        """Test the reason reported for a suspended license."""
        license = _license().suspend()

        assert license.is_valid() is False
        assert license.invalid_reason() == "License is suspended"

    def test_revoked_license_reason(self):
        """Test the reason reported for a revoked license."""
        license = _license().revoke()

        assert license.invalid_reason() == "License is revoked"

    def test_stored_expired_status(self):
        """Test a license marked expired is invalid even with a future expiry."""
        license = replace(
            _license(datetime.now(timezone.utc) + timedelta(days=5)), status=LicenseStatus.EXPIRED
        )

        assert license.invalid_reason() == "License has expired"
        assert license.is_expired() is True

    def test_is_expired_ignores_suspended_and_perpetual(self):
        """Test only active or expired-status licenses report expiry."""
        past = datetime.now(timezone.utc) - timedelta(days=1)

        assert _license(past).is_expired() is True
        assert _license(past).suspend().is_expired() is False
        assert _license(None).is_expired() is False

    def test_suspend_and_resume(self):
        """Test suspending and resuming a license."""
        license = _license()

        suspended = license.suspend()
        assert suspended.status == LicenseStatus.SUSPENDED
        assert license.status == LicenseStatus.ACTIVE

        resumed = suspended.resume()
        assert resumed.status == LicenseStatus.ACTIVE

    def test_resume_requires_suspended(self):
        """Test resuming an active license is rejected."""
        with pytest.raises(InvalidLicenseStatusError):
            _license().resume()

    def test_revoke_is_terminal(self):
        """Test a revoked license cannot be changed again."""
        revoked = _license().revoke()

        with pytest.raises(InvalidLicenseStatusError):
            revoked.revoke()
        with pytest.raises(InvalidLicenseStatusError):
            revoked.suspend()
        with pytest.raises(InvalidLicenseStatusError):
            revoked.resume()
        with pytest.raises(InvalidLicenseStatusError):
            revoked.renew(datetime.now(timezone.utc) + timedelta(days=30))

    def test_renew_reactivates_expired_license(self):
        """Test renewing an expired license makes it active again."""
        expired = replace(
            _license(datetime.now(timezone.utc) + timedelta(days=1)), status=LicenseStatus.EXPIRED
        )
        new_expiry = datetime.now(timezone.utc) + timedelta(days=365)

        renewed = expired.renew(new_expiry)

        assert renewed.status == LicenseStatus.ACTIVE
        assert renewed.expires_at == new_expiry
        assert renewed.is_valid() is True

    def test_renew_keeps_suspension(self):
        """Test renewing a suspended license does not resume it."""
        suspended = _license().suspend()

        renewed = suspended.renew(datetime.now(timezone.utc) + timedelta(days=10))

        assert renewed.status == LicenseStatus.SUSPENDED

    def test_renew_rejects_past_expiry(self):
        """Test renewing with a past expiry."""
        with pytest.raises(InvalidExpiryError):
            _license().renew(datetime.now(timezone.utc) - timedelta(days=1))

    def test_entity_is_immutable(self):
        """Test transitions return new instances."""
        license = _license()

        with pytest.raises(AttributeError):
            license.status = LicenseStatus.REVOKED


class TestLicenseStateEvaluator:
    """Tests for LicenseStateEvaluator service."""

    def test_usable_license(self):
        state = LicenseStateEvaluator.evaluate(_license())

        assert state.usable is True
        assert state.reason is None

    def test_unusable_license_carries_reason(self):
        expires_at = datetime(2020, 1, 1, tzinfo=timezone.utc)

        state = LicenseStateEvaluator.evaluate(_license(expires_at))

        assert state.usable is False
        assert state.reason == "License has expired"
