"""
DeactivateMachineHandler.

Handler for releasing the activation slot held by a machine.
"""

import logging

from activations.application.commands.deactivate_machine import DeactivateMachineCommand
from activations.application.dto.activation_dto import DeactivationResultDTO
from activations.application.handlers.validate_license_handler import (
    MISSING_FIELDS_REASON,
    SERVER_ERROR_REASON,
    key_prefix,
)
from activations.domain.fingerprint import hash_machine_identity
from activations.domain.services import ActivationLifecycleManager
from activations.ports.activation_repository import ActivationRepository
from audit.ports.audit_repository import AuditRepository
from core.domain.value_objects import AuditAction, ValidationCode
from core.metrics import activations_released_total
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class DeactivateMachineHandler:
    """Handler for DeactivateMachineCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        audit_repository: AuditRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.audit_repository = audit_repository

    async def handle(self, command: DeactivateMachineCommand) -> DeactivationResultDTO:
        """
        Handle deactivate machine command.

        An unknown license or a machine without an activation is not an
        error; the result simply reports ``released`` False.

        Args:
            command: DeactivateMachineCommand

        Returns:
            DeactivationResultDTO
        """
        license_key = (command.license_key or "").strip()
        machine_id = command.machine_id or ""
        if not license_key or not machine_id.strip():
            return DeactivationResultDTO(
                released=False,
                reason=MISSING_FIELDS_REASON,
                code=ValidationCode.MISSING_FIELDS.value,
            )

        try:
            fingerprint = hash_machine_identity(machine_id)
            license = await self.license_repository.find_by_key(license_key)
            if not license:
                return DeactivationResultDTO(released=False)

            activation = await ActivationLifecycleManager.release(
                license.id, fingerprint, self.activation_repository
            )
            if activation is None:
                return DeactivationResultDTO(released=False)

            await self.audit_repository.append(
                license.id,
                AuditAction.DEACTIVATED,
                fingerprint,
                {"activation_id": str(activation.id)},
            )
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error(
                "Deactivation failed",
                extra={"license_key_prefix": key_prefix(license_key)},
                exc_info=True,
            )
            return DeactivationResultDTO(
                released=False,
                reason=SERVER_ERROR_REASON,
                code=ValidationCode.SERVER_ERROR.value,
            )

        activations_released_total.inc()
        logger.info(
            "Machine deactivated",
            extra={"license_id": str(license.id), "fingerprint": fingerprint.short},
        )
        return DeactivationResultDTO(released=True)
