"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Iterable, Optional

from core.domain.exceptions import InvalidExpiryError, InvalidLicenseStatusError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license_key import generate_id, generate_license_key, validate_license_key


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Grants a customer the right to run a product on up to
    ``max_activations`` machines until ``expires_at`` (``None`` means
    perpetual). ``current_activations`` mirrors the number of activation
    rows and is only ever changed through the activation repository.
    """

    id: uuid.UUID
    license_key: str
    product_id: uuid.UUID
    customer_id: uuid.UUID
    status: LicenseStatus
    max_activations: int
    current_activations: int
    features: FrozenSet[str]
    expires_at: Optional[datetime]
    issued_at: datetime
    created_at: datetime
    updated_at: datetime
    metadata: Dict = field(default_factory=dict, compare=False)

    def __post_init__(self):
        """Validate license entity."""
        validate_license_key(self.license_key)
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.customer_id:
            raise ValueError("Customer ID is required")
        if self.max_activations < 1:
            raise ValueError("Max activations must be at least 1")
        if self.current_activations < 0:
            raise ValueError("Current activations cannot be negative")

    @classmethod
    def create(
        cls,
        product_id: uuid.UUID,
        customer_id: uuid.UUID,
        max_activations: int = 1,
        expires_at: Optional[datetime] = None,
        features: Optional[Iterable[str]] = None,
        metadata: Optional[Dict] = None,
        license_id: Optional[uuid.UUID] = None,
        license_key: Optional[str] = None,
    ) -> "License":
        """
        Create a new License entity.

        Args:
            product_id: Product UUID
            customer_id: Customer UUID
            max_activations: Maximum number of concurrent machine activations
            expires_at: Optional expiration datetime (None for perpetual)
            features: Feature flags granted by the license
            metadata: Opaque metadata stored with the license
            license_id: Optional UUID (generated if not provided)
            license_key: Optional key (generated if not provided)

        Returns:
            License entity instance
        """
        now = utc_now()
        return cls(
            id=license_id or generate_id(),
            license_key=license_key or generate_license_key(),
            product_id=product_id,
            customer_id=customer_id,
            status=LicenseStatus.ACTIVE,
            max_activations=max_activations,
            current_activations=0,
            features=frozenset(features or ()),
            expires_at=expires_at,
            issued_at=now,
            created_at=now,
            updated_at=now,
            metadata=metadata or {},
        )

    @property
    def is_perpetual(self) -> bool:
        return self.expires_at is None

    def invalid_reason(self, current_time: Optional[datetime] = None) -> Optional[str]:
        """
        Explain why the license cannot be used at ``current_time``.

        A license is usable only when its status is active and its expiry
        lies strictly after ``current_time``.

        Args:
            current_time: Evaluation time (defaults to now)

        Returns:
            None when usable, otherwise the human-readable reason
        """
        if self.is_expired(current_time):
            return "License has expired"
        if self.status != LicenseStatus.ACTIVE:
            return f"License is {self.status.value}"
        return None

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        An expired status, or an active license whose expiry has passed.

        Suspended and revoked licenses report their status instead.
        """
        if self.status == LicenseStatus.EXPIRED:
            return True
        if self.status != LicenseStatus.ACTIVE or self.expires_at is None:
            return False
        return self.expires_at <= (current_time or utc_now())

    def is_valid(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check if license is currently valid.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if license is active and not expired
        """
        return self.invalid_reason(current_time) is None

    def renew(self, new_expiration: datetime) -> "License":
        """
        Create a new License instance with renewed expiration.

        A stored expired status is lifted back to active.

        Args:
            new_expiration: New expiration datetime

        Returns:
            New License instance with updated expiration
        """
        if self.status == LicenseStatus.REVOKED:
            raise InvalidLicenseStatusError("Cannot renew a revoked license")
        if new_expiration <= utc_now():
            raise InvalidExpiryError("Expiration date cannot be in the past")

        new_status = (
            LicenseStatus.ACTIVE if self.status == LicenseStatus.EXPIRED else self.status
        )
        return replace(self, status=new_status, expires_at=new_expiration, updated_at=utc_now())

    def suspend(self) -> "License":
        """
        Create a new License instance with suspended status.

        Returns:
            New License instance with suspended status
        """
        if self.status == LicenseStatus.REVOKED:
            raise InvalidLicenseStatusError("Cannot suspend a revoked license")

        return replace(self, status=LicenseStatus.SUSPENDED, updated_at=utc_now())

    def resume(self) -> "License":
        """
        Create a new License instance with active status.

        Returns:
            New License instance with active status
        """
        if self.status != LicenseStatus.SUSPENDED:
            raise InvalidLicenseStatusError("Can only resume a suspended license")

        return replace(self, status=LicenseStatus.ACTIVE, updated_at=utc_now())

    def revoke(self) -> "License":
        """
        Create a new License instance with revoked status.

        Revocation is terminal.

        Returns:
            New License instance with revoked status
        """
        if self.status == LicenseStatus.REVOKED:
            raise InvalidLicenseStatusError("License is already revoked")

        return replace(self, status=LicenseStatus.REVOKED, updated_at=utc_now())
