"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import Dict, List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction
from django.utils import timezone

from activations.domain.activation import Activation, SlotAllocation
from activations.infrastructure.models import Activation as ActivationModel
from activations.ports.activation_repository import ActivationRepository
from core.domain.value_objects import MachineFingerprint
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import (
    adjust_activation_count,
)


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Runs row and counter changes in one transaction
    3. Implements repository interface
    """

    def _to_domain(self, model: ActivationModel) -> Activation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Activation model

        Returns:
            Activation domain entity
        """
        return Activation(
            id=model.id,
            license_id=model.license_id,
            machine_fingerprint=MachineFingerprint(model.machine_fingerprint),
            activated_at=model.activated_at,
            last_heartbeat=model.last_heartbeat,
            client_info=model.client_info or {},
        )

    @sync_to_async
    def find_by_license_and_fingerprint(
        self, license_id: uuid.UUID, fingerprint: MachineFingerprint
    ) -> Optional[Activation]:
        """
        Find the activation of a machine on a license.

        Args:
            license_id: License UUID
            fingerprint: Hashed machine identity

        Returns:
            Activation entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = ActivationModel.objects.get(
                license_id=license_id,
                machine_fingerprint=str(fingerprint),
            )
            return self._to_domain(model)
        except ActivationModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def update_heartbeat(self, activation_id: uuid.UUID) -> Optional[Activation]:
        """
        Refresh the last heartbeat of an activation.

        Args:
            activation_id: Activation UUID

        Returns:
            Updated activation entity or None if the row is gone
        """
        return self._touch(activation_id)

    @sync_to_async
    def find_all_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        Find all activations for a license.

        Args:
            license_id: License UUID

        Returns:
            List of Activation entities
        """
        models = ActivationModel.objects.filter(license_id=license_id)  # pylint: disable=no-member
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def count_by_license(self, license_id: uuid.UUID) -> int:
        """
        Count activation rows for a license.

        Args:
            license_id: License UUID

        Returns:
            Number of activation rows
        """
        return ActivationModel.objects.filter(license_id=license_id).count()  # pylint: disable=no-member

    @sync_to_async
    def allocate(
        self,
        license_id: uuid.UUID,
        fingerprint: MachineFingerprint,
        client_info: Optional[Dict] = None,
    ) -> Optional[SlotAllocation]:
        """
        Claim an activation slot for a machine.

        Args:
            license_id: License UUID
            fingerprint: Hashed machine identity
            client_info: Client metadata stored with a new row

        Returns:
            SlotAllocation, or None when the ceiling is reached
        """
        while True:
            with transaction.atomic():
                # pylint: disable=no-member
                model, created = ActivationModel.objects.get_or_create(
                    license_id=license_id,
                    machine_fingerprint=str(fingerprint),
                    defaults={"client_info": client_info or {}},
                )
                if not created:
                    activation = self._touch(model.id)
                    if activation is None:
                        # Released between the lookup and the touch; claim again
                        continue
                    return SlotAllocation(activation=activation, created=False)

                if not adjust_activation_count(license_id, 1):
                    # Ceiling reached: roll back the insert
                    transaction.set_rollback(True)
                    return None

                return SlotAllocation(activation=self._to_domain(model), created=True)

    @sync_to_async
    def release(
        self, license_id: uuid.UUID, fingerprint: MachineFingerprint
    ) -> Optional[Activation]:
        """
        Delete a machine's activation and decrement the license counter.

        Args:
            license_id: License UUID
            fingerprint: Hashed machine identity

        Returns:
            The deleted activation, or None if there was none
        """
        with transaction.atomic():
            # pylint: disable=no-member
            model = (
                ActivationModel.objects.select_for_update()
                .filter(license_id=license_id, machine_fingerprint=str(fingerprint))
                .first()
            )
            if model is None:
                return None

            activation = self._to_domain(model)
            model.delete()
            adjust_activation_count(license_id, -1)
            return activation

    @sync_to_async
    def reconcile(self, license_id: uuid.UUID) -> tuple[int, int]:
        """
        Recount activation rows and overwrite the license counter.

        Args:
            license_id: License UUID

        Returns:
            Tuple of (previous counter value, actual row count)
        """
        with transaction.atomic():
            # Serializes against allocate/release on PostgreSQL
            # pylint: disable=no-member
            license_model = LicenseModel.objects.select_for_update().get(id=license_id)
            actual = ActivationModel.objects.filter(license_id=license_id).count()
            previous = license_model.current_activations
            if previous != actual:
                LicenseModel.objects.filter(id=license_id).update(current_activations=actual)
            return previous, actual

    def _touch(self, activation_id: uuid.UUID) -> Optional[Activation]:
        now = timezone.now()
        # pylint: disable=no-member
        updated = ActivationModel.objects.filter(id=activation_id).update(last_heartbeat=now)
        if not updated:
            return None
        return self._to_domain(ActivationModel.objects.get(id=activation_id))
