"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

import uuid
from typing import Dict, Optional

from activations.domain.activation import Activation, SlotAllocation
from activations.ports.activation_repository import ActivationRepository
from core.domain.value_objects import MachineFingerprint
from licenses.domain.license import License


class ActivationLifecycleManager:
    """
    Domain service owning the activation slots of a license.

    Every change to a license's activation counter goes through here and
    lands in the repository as one atomic row-plus-counter operation.
    """

    @staticmethod
    async def claim(
        license: License,
        fingerprint: MachineFingerprint,
        client_info: Optional[Dict],
        repository: ActivationRepository,
    ) -> Optional[SlotAllocation]:
        """
        Give a machine a slot on a license it is validating against.

        A machine that already holds a slot only gets its heartbeat
        refreshed. A new machine gets a slot if one is free.

        Args:
            license: License entity (already known to be usable)
            fingerprint: Hashed machine identity
            client_info: Client metadata stored with a new activation
            repository: Activation repository

        Returns:
            SlotAllocation (``created`` is False for a renewal), or None
            when every slot is taken
        """
        existing = await repository.find_by_license_and_fingerprint(license.id, fingerprint)
        if existing:
            refreshed = await repository.update_heartbeat(existing.id)
            if refreshed:
                return SlotAllocation(activation=refreshed, created=False)
            # Row was released between the read and the heartbeat

        return await repository.allocate(license.id, fingerprint, client_info)

    @staticmethod
    async def release(
        license_id: uuid.UUID,
        fingerprint: MachineFingerprint,
        repository: ActivationRepository,
    ) -> Optional[Activation]:
        """
        Free the slot held by a machine.

        Args:
            license_id: License UUID
            fingerprint: Hashed machine identity
            repository: Activation repository

        Returns:
            The released activation, or None if the machine held no slot
        """
        return await repository.release(license_id, fingerprint)

    @staticmethod
    async def reconcile(
        license_id: uuid.UUID,
        repository: ActivationRepository,
    ) -> tuple[int, int]:
        """
        Repair a drifted activation counter.

        Args:
            license_id: License UUID
            repository: Activation repository

        Returns:
            Tuple of (previous counter value, actual row count)
        """
        return await repository.reconcile(license_id)
