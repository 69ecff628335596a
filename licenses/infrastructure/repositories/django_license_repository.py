"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db.models import F

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository

ADMINISTRATIVE_FIELDS = ["status", "expires_at", "max_activations", "features", "metadata", "updated_at"]


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            license_key=model.license_key,
            product_id=model.product_id,
            customer_id=model.customer_id,
            status=LicenseStatus(model.status),
            max_activations=model.max_activations,
            current_activations=model.current_activations,
            features=frozenset(model.features or []),
            expires_at=model.expires_at,
            issued_at=model.issued_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            metadata=model.metadata or {},
        )

    def _to_model(self, license: License) -> tuple[LicenseModel, bool]:
        """
        Convert domain entity to Django model.

        Args:
            license: License domain entity

        Returns:
            Tuple of (Django License model, created flag)
        """
        # pylint: disable=no-member
        model, created = LicenseModel.objects.get_or_create(
            id=license.id,
            defaults={
                "license_key": license.license_key,
                "product_id": license.product_id,
                "customer_id": license.customer_id,
                "status": license.status.value,
                "max_activations": license.max_activations,
                "current_activations": 0,
                "features": sorted(license.features),
                "metadata": license.metadata,
                "issued_at": license.issued_at,
                "expires_at": license.expires_at,
            },
        )
        if not created:
            model.status = license.status.value
            model.max_activations = license.max_activations
            model.expires_at = license.expires_at
            model.features = sorted(license.features)
            model.metadata = license.metadata
        return model, created

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        model, created = self._to_model(license)
        if not created:
            # current_activations is not among update_fields
            model.save(update_fields=ADMINISTRATIVE_FIELDS)
            model.refresh_from_db()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(id=license_id)  # pylint: disable=no-member
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(license_key=license_key)  # pylint: disable=no-member
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def find_all(self) -> List[License]:
        """
        List all licenses.

        Returns:
            List of License entities
        """
        return [self._to_domain(model) for model in LicenseModel.objects.all()]  # pylint: disable=no-member

    @sync_to_async
    def find_by_customer(self, customer_id: uuid.UUID) -> List[License]:
        """
        Find all licenses owned by a customer.

        Args:
            customer_id: Customer UUID

        Returns:
            List of License entities, newest first
        """
        # pylint: disable=no-member
        models = LicenseModel.objects.filter(customer_id=customer_id)
        return [self._to_domain(model) for model in models]


def adjust_activation_count(license_id: uuid.UUID, delta: int) -> bool:
    """
    Single conditional UPDATE on the license row.

    The bound check and the write happen in one statement, so concurrent
    callers can never push the counter past ``max_activations`` or below
    zero. Callers that need the row change and the counter change to commit
    together run this inside their own ``transaction.atomic`` block.

    Args:
        license_id: License UUID
        delta: +1 or -1

    Returns:
        True if one row was updated
    """
    if delta not in (1, -1):
        raise ValueError("Activation count can only change by one")

    queryset = LicenseModel.objects.filter(id=license_id)  # pylint: disable=no-member
    if delta > 0:
        queryset = queryset.filter(current_activations__lt=F("max_activations"))
    else:
        queryset = queryset.filter(current_activations__gt=0)
    return queryset.update(current_activations=F("current_activations") + delta) == 1
