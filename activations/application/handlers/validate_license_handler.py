"""
ValidateLicenseHandler.

Decides whether a machine may use a license, records the decision and
signs successful results.
"""

import logging
import time
from typing import Optional

from django.conf import settings

from activations.application.commands.validate_license import ValidateLicenseCommand
from activations.application.dto.activation_dto import ValidationResultDTO
from activations.domain.fingerprint import hash_machine_identity
from activations.domain.services import ActivationLifecycleManager
from activations.ports.activation_repository import ActivationRepository
from activations.ports.attestation_signer import AttestationSigner
from audit.ports.audit_repository import AuditRepository
from core.domain.value_objects import AuditAction, MachineFingerprint, ValidationCode
from core.metrics import (
    activations_granted_total,
    attestations_issued_total,
    license_validation_duration_seconds,
    license_validations_total,
)
from licenses.domain.license import License
from licenses.domain.services import LicenseStateEvaluator
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

MISSING_FIELDS_REASON = "Missing required fields"
TIMESTAMP_INVALID_REASON = "Request timestamp too old"
LICENSE_NOT_FOUND_REASON = "Invalid license key"
MAX_ACTIVATIONS_REASON = "Maximum activations reached"
SERVER_ERROR_REASON = "Internal server error"


def key_prefix(license_key: str) -> str:
    """Loggable prefix of a license key."""
    return (license_key or "")[:4] + "-****"


class ValidateLicenseHandler:
    """Handler for ValidateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        audit_repository: AuditRepository,
        signer: AttestationSigner,
        timestamp_tolerance: Optional[int] = None,
        audit_unknown_keys: Optional[bool] = None,
    ):
        """Initialize handler with repositories and the attestation signer."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.audit_repository = audit_repository
        self.signer = signer
        self.timestamp_tolerance = (
            timestamp_tolerance
            if timestamp_tolerance is not None
            else settings.LICENSE_TIMESTAMP_TOLERANCE_SECONDS
        )
        self.audit_unknown_keys = (
            audit_unknown_keys
            if audit_unknown_keys is not None
            else settings.LICENSE_AUDIT_UNKNOWN_KEYS
        )

    async def handle(self, command: ValidateLicenseCommand) -> ValidationResultDTO:
        """
        Handle validate license command.

        Never raises: every failure, including storage errors, comes back
        as a result with ``valid`` False and a ValidationCode.

        Args:
            command: ValidateLicenseCommand

        Returns:
            ValidationResultDTO
        """
        started = time.monotonic()
        try:
            result = await self._validate(command)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error(
                "License validation failed",
                extra={"license_key_prefix": key_prefix(command.license_key)},
                exc_info=True,
            )
            result = self._failure(ValidationCode.SERVER_ERROR, SERVER_ERROR_REASON)
        finally:
            license_validation_duration_seconds.observe(time.monotonic() - started)

        license_validations_total.labels(code=result.code or "VALID").inc()
        return result

    async def _validate(self, command: ValidateLicenseCommand) -> ValidationResultDTO:
        license_key = (command.license_key or "").strip()
        machine_id = command.machine_id or ""
        if not license_key or not machine_id.strip():
            return self._failure(ValidationCode.MISSING_FIELDS, MISSING_FIELDS_REASON)

        if command.timestamp is not None and not self._timestamp_fresh(command.timestamp):
            return self._failure(ValidationCode.TIMESTAMP_INVALID, TIMESTAMP_INVALID_REASON)

        fingerprint = hash_machine_identity(machine_id)

        license = await self.license_repository.find_by_key(license_key)
        if not license:
            logger.info(
                "Unknown license key",
                extra={"license_key_prefix": key_prefix(license_key), "fingerprint": fingerprint.short},
            )
            if self.audit_unknown_keys:
                await self.audit_repository.append(
                    None,
                    AuditAction.VALIDATION_FAILED,
                    fingerprint,
                    {"reason": LICENSE_NOT_FOUND_REASON},
                )
            return self._failure(ValidationCode.LICENSE_NOT_FOUND, LICENSE_NOT_FOUND_REASON)

        state = LicenseStateEvaluator.evaluate(license)
        if not state.usable:
            await self.audit_repository.append(
                license.id, AuditAction.VALIDATION_FAILED, fingerprint, {"reason": state.reason}
            )
            logger.info(
                "License not usable",
                extra={"license_id": str(license.id), "reason": state.reason},
            )
            return self._failure(ValidationCode.LICENSE_INVALID, state.reason)

        allocation = await ActivationLifecycleManager.claim(
            license, fingerprint, command.client_info, self.activation_repository
        )
        if allocation is None:
            await self.audit_repository.append(
                license.id,
                AuditAction.ACTIVATION_REJECTED,
                fingerprint,
                {"reason": "max_activations_reached"},
            )
            logger.info(
                "Activation rejected, no free slot",
                extra={
                    "license_id": str(license.id),
                    "fingerprint": fingerprint.short,
                    "max_activations": license.max_activations,
                },
            )
            return self._failure(ValidationCode.MAX_ACTIVATIONS, MAX_ACTIVATIONS_REASON)

        action = AuditAction.ACTIVATED if allocation.created else AuditAction.VALIDATED
        await self.audit_repository.append(
            license.id, action, fingerprint, {"client_info": command.client_info or {}}
        )
        if allocation.created:
            activations_granted_total.inc()
            logger.info(
                "Machine activated",
                extra={"license_id": str(license.id), "fingerprint": fingerprint.short},
            )

        # Re-read for the counter value after this request's update
        current = await self.license_repository.find_by_id(license.id) or license
        return self._success(current, str(allocation.activation.id), fingerprint)

    def _timestamp_fresh(self, timestamp: int) -> bool:
        return abs(time.time() - timestamp) <= self.timestamp_tolerance

    def _success(
        self, license: License, activation_id: str, fingerprint: MachineFingerprint
    ) -> ValidationResultDTO:
        result = ValidationResultDTO(
            valid=True,
            license_key=license.license_key,
            product_id=str(license.product_id),
            expiry=int(license.expires_at.timestamp()) if license.expires_at else None,
            features=sorted(license.features),
            activation_id=activation_id,
            max_activations=license.max_activations,
            current_activations=license.current_activations,
        )
        payload = result.attestation_payload()
        payload["machine_fingerprint"] = str(fingerprint)
        result.signature = self.signer.sign(payload)
        attestations_issued_total.inc()
        return result

    @staticmethod
    def _failure(code: ValidationCode, reason: str) -> ValidationResultDTO:
        return ValidationResultDTO(valid=False, reason=reason, code=code.value)
