"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import string
from abc import ABC
from dataclasses import dataclass
from enum import Enum

HEX_DIGITS = frozenset(string.hexdigits.lower())


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class MachineFingerprint(ValueObject):
    """
    SHA-256 digest of a raw machine identity.

    Only fingerprints are stored, compared or logged; the raw identity
    never leaves the hasher.
    """

    value: str

    def __post_init__(self):
        """Validate digest format."""
        if len(self.value) != 64 or not set(self.value) <= HEX_DIGITS:
            raise ValueError("Machine fingerprint must be 64 lowercase hex characters")

    @property
    def short(self) -> str:
        """Prefix used in log lines."""
        return self.value[:12]

    def __str__(self) -> str:
        """Return fingerprint as string."""
        return self.value


class LicenseStatus(Enum):
    """Stored license status."""

    ACTIVE = "active"
    EXPIRED = "expired"
    SUSPENDED = "suspended"
    REVOKED = "revoked"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class AuditAction(Enum):
    """Actions recorded in the audit trail."""

    VALIDATED = "validated"
    ACTIVATED = "activated"
    VALIDATION_FAILED = "validation_failed"
    ACTIVATION_REJECTED = "activation_rejected"
    DEACTIVATED = "deactivated"

    def __str__(self) -> str:
        return self.value


class ValidationCode(Enum):
    """Outcome codes of a failed validation or deactivation."""

    MISSING_FIELDS = "MISSING_FIELDS"
    TIMESTAMP_INVALID = "TIMESTAMP_INVALID"
    LICENSE_NOT_FOUND = "LICENSE_NOT_FOUND"
    LICENSE_INVALID = "LICENSE_INVALID"
    MAX_ACTIVATIONS = "MAX_ACTIVATIONS"
    SERVER_ERROR = "SERVER_ERROR"

    def __str__(self) -> str:
        return self.value
