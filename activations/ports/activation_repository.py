"""
Activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import uuid

from activations.domain.activation import Activation, SlotAllocation
from core.domain.value_objects import MachineFingerprint


class ActivationRepository(ABC):
    """
    Abstract repository for Activation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.

    ``allocate``, ``release`` and ``reconcile`` are the only operations that
    change a license's activation counter, and each one runs as a single
    atomic unit together with the matching row change.
    """

    @abstractmethod
    async def find_by_license_and_fingerprint(
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
        pass

    @abstractmethod
    async def update_heartbeat(self, activation_id: uuid.UUID) -> Optional[Activation]:
        """
        Refresh the last heartbeat of an activation.

        Args:
            activation_id: Activation UUID

        Returns:
            Updated activation entity or None if the row is gone
        """
        pass

    @abstractmethod
    async def find_all_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        Find all activations for a license.

        Args:
            license_id: License UUID

        Returns:
            List of Activation entities
        """
        pass

    @abstractmethod
    async def count_by_license(self, license_id: uuid.UUID) -> int:
        """
        Count activation rows for a license.

        Args:
            license_id: License UUID

        Returns:
            Number of activation rows
        """
        pass

    @abstractmethod
    async def allocate(
        self,
        license_id: uuid.UUID,
        fingerprint: MachineFingerprint,
        client_info: Optional[Dict] = None,
    ) -> Optional[SlotAllocation]:
        """
        Claim an activation slot for a machine.

        Creates the activation row and increments the license counter in one
        transaction, conditional on the counter being below the ceiling. If a
        row for the machine already exists its heartbeat is refreshed and the
        counter is left alone.

        Args:
            license_id: License UUID
            fingerprint: Hashed machine identity
            client_info: Client metadata stored with a new row

        Returns:
            SlotAllocation (``created`` False when the row already existed),
            or None when the ceiling is reached
        """
        pass

    @abstractmethod
    async def release(
        self, license_id: uuid.UUID, fingerprint: MachineFingerprint
    ) -> Optional[Activation]:
        """
        Delete a machine's activation and decrement the license counter
        (never below zero) in one transaction.

        Args:
            license_id: License UUID
            fingerprint: Hashed machine identity

        Returns:
            The deleted activation, or None if there was none
        """
        pass

    @abstractmethod
    async def reconcile(self, license_id: uuid.UUID) -> tuple[int, int]:
        """
        Recount activation rows and overwrite the license counter.

        Args:
            license_id: License UUID

        Returns:
            Tuple of (previous counter value, actual row count)
        """
        pass
