"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from activations.application.dto.activation_dto import ActivationDTO
from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    license_key: str
    product_id: uuid.UUID
    customer_id: uuid.UUID
    status: str
    is_valid: bool
    max_activations: int
    current_activations: int
    features: List[str]
    issued_at: datetime
    expires_at: Optional[datetime]
    metadata: Dict = field(default_factory=dict)

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """Build the DTO from a License entity."""
        return cls(
            id=license.id,
            license_key=license.license_key,
            product_id=license.product_id,
            customer_id=license.customer_id,
            status=license.status.value,
            is_valid=license.is_valid(),
            max_activations=license.max_activations,
            current_activations=license.current_activations,
            features=sorted(license.features),
            issued_at=license.issued_at,
            expires_at=license.expires_at,
            metadata=license.metadata,
        )


@dataclass
class LicenseStatusDTO:
    """DTO for license status response."""

    license: LicenseDTO
    activations: List[ActivationDTO]


@dataclass
class LicenseListItemDTO:
    """DTO for one row of a license listing."""

    license_key: str
    product_name: str
    customer_email: str
    status: str
    is_valid: bool
    expires_at: Optional[datetime]
    current_activations: int
    max_activations: int


@dataclass
class LicenseStatsDTO:
    """Totals across all licenses."""

    total_licenses: int = 0
    active_licenses: int = 0
    expired_licenses: int = 0
    unique_customers: int = 0
    total_products: int = 0
    total_activations: int = 0


@dataclass
class ProductStatsDTO:
    """License totals for one product."""

    product_id: uuid.UUID
    product_name: str
    total_count: int = 0
    active_count: int = 0
    total_activations: int = 0


@dataclass
class LicenseReportDTO:
    """DTO for the license report."""

    stats: LicenseStatsDTO
    product_stats: List[ProductStatsDTO]
