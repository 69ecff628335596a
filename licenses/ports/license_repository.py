"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Only administrative fields are written; the activation counter is
        owned by the activation repository.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_all(self) -> List[License]:
        """
        List all licenses.

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def find_by_customer(self, customer_id: uuid.UUID) -> List[License]:
        """
        Find all licenses owned by a customer.

        Args:
            customer_id: Customer UUID

        Returns:
            List of License entities
        """
        pass
