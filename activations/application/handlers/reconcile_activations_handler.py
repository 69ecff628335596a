"""
ReconcileActivationsHandler.

Repairs a license whose activation counter drifted from its rows.
"""

import logging

from activations.application.dto.activation_dto import ReconcileResultDTO
from activations.domain.services import ActivationLifecycleManager
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import LicenseNotFoundError
from core.metrics import activation_counts_reconciled_total
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ReconcileActivationsHandler:
    """Recounts activation rows and overwrites the license counter."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, license_key: str) -> ReconcileResultDTO:
        """
        Reconcile one license.

        Args:
            license_key: License key

        Returns:
            ReconcileResultDTO

        Raises:
            LicenseNotFoundError: If license key not found
        """
        license = await self.license_repository.find_by_key(license_key)
        if not license:
            raise LicenseNotFoundError()

        previous, actual = await ActivationLifecycleManager.reconcile(
            license.id, self.activation_repository
        )
        result = ReconcileResultDTO(license_key=license.license_key, previous=previous, actual=actual)
        if result.changed:
            activation_counts_reconciled_total.inc()
            logger.warning(
                "Activation counter drift corrected",
                extra={"license_id": str(license.id), "previous": previous, "actual": actual},
            )
        return result
