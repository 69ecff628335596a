"""
Activation DTOs for API responses.
"""
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class ActivationDTO:
    """DTO for activation information. Carries the fingerprint, never the raw id."""

    id: uuid.UUID
    license_id: uuid.UUID
    machine_fingerprint: str
    activated_at: datetime
    last_heartbeat: datetime


@dataclass
class ValidationResultDTO:
    """
    DTO for a validation decision.

    ``code`` and ``reason`` are set on failure; the license fields and
    ``signature`` are set on success.
    """

    valid: bool
    reason: Optional[str] = None
    code: Optional[str] = None
    license_key: Optional[str] = None
    product_id: Optional[str] = None
    expiry: Optional[int] = None
    features: Optional[List[str]] = None
    activation_id: Optional[str] = None
    max_activations: Optional[int] = None
    current_activations: Optional[int] = None
    signature: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Response body without unset fields.

        A successful result always carries ``expiry``, null for perpetual
        licenses.
        """
        body = {key: value for key, value in asdict(self).items() if value is not None}
        if self.valid:
            body["expiry"] = self.expiry
        return body

    def attestation_payload(self) -> Dict[str, Any]:
        """Claims covered by the signature."""
        payload = self.to_dict()
        payload.pop("signature", None)
        return payload


@dataclass
class DeactivationResultDTO:
    """DTO for a deactivation outcome."""

    released: bool
    reason: Optional[str] = None
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass
class ReconcileResultDTO:
    """DTO for an activation counter reconciliation."""

    license_key: str
    previous: int
    actual: int

    @property
    def changed(self) -> bool:
        return self.previous != self.actual
