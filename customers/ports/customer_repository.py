"""
Customer repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Optional
import uuid

from customers.domain.customer import Customer


class CustomerRepository(ABC):
    """
    Abstract repository for Customer entities.

    Customers are maintained through the Django admin; the engine only
    reads them.
    """

    @abstractmethod
    async def find_by_id(self, customer_id: uuid.UUID) -> Optional[Customer]:
        """
        Find a customer by ID.

        Args:
            customer_id: Customer UUID

        Returns:
            Customer entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Customer]:
        """
        Find a customer by email address (case-insensitive).

        Args:
            email: Customer email

        Returns:
            Customer entity or None if not found
        """
        pass
