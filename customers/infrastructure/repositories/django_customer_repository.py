"""
Django implementation of CustomerRepository port.
"""

import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from core.domain.value_objects import Email
from customers.domain.customer import Customer
from customers.infrastructure.models import Customer as CustomerModel
from customers.ports.customer_repository import CustomerRepository


class DjangoCustomerRepository(CustomerRepository):
    """Django ORM implementation of CustomerRepository."""

    def _to_domain(self, model: CustomerModel) -> Customer:
        return Customer(
            id=model.id,
            name=model.name,
            email=Email(model.email),
            company=model.company or None,
        )

    @sync_to_async
    def find_by_id(self, customer_id: uuid.UUID) -> Optional[Customer]:
        """
        Find a customer by ID.

        Args:
            customer_id: Customer UUID

        Returns:
            Customer entity or None if not found
        """
        try:
            # pylint: disable=no-member
            return self._to_domain(CustomerModel.objects.get(id=customer_id))
        except CustomerModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def find_by_email(self, email: str) -> Optional[Customer]:
        """
        Find a customer by email address (case-insensitive).

        Args:
            email: Customer email

        Returns:
            Customer entity or None if not found
        """
        try:
            # pylint: disable=no-member
            return self._to_domain(CustomerModel.objects.get(email__iexact=email.strip()))
        except CustomerModel.DoesNotExist:  # pylint: disable=no-member
            return None
