"""
Product domain entity.

This is the core domain entity representing a product.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    Represents a product that can be licensed, together with the
    defaults applied to licenses issued for it.
    """

    id: uuid.UUID
    name: str
    version: str
    features: FrozenSet[str]
    default_max_activations: int
    default_validity_days: int

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Product name cannot be empty")
        if self.default_max_activations < 1:
            raise ValueError("Default max activations must be at least 1")
        if self.default_validity_days < 0:
            raise ValueError("Default validity days cannot be negative")

    def default_expiry(self, issued_at: datetime) -> Optional[datetime]:
        """
        Expiry for a license issued at ``issued_at`` without an explicit one.

        Returns:
            Expiry datetime, or None when the product issues perpetual licenses
        """
        if self.default_validity_days == 0:
            return None
        return issued_at + timedelta(days=self.default_validity_days)
