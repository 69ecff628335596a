"""
Django implementation of AuditRepository port.
"""
import uuid
from typing import Dict, List, Optional

from asgiref.sync import sync_to_async

from audit.domain.audit_entry import AuditEntry
from audit.infrastructure.models import AuditEntry as AuditEntryModel
from audit.ports.audit_repository import AuditRepository
from core.domain.value_objects import AuditAction, MachineFingerprint


class DjangoAuditRepository(AuditRepository):
    """Django ORM implementation of AuditRepository."""

    def _to_domain(self, model: AuditEntryModel) -> AuditEntry:
        return AuditEntry(
            id=model.id,
            license_id=model.license_id,
            action=AuditAction(model.action),
            machine_fingerprint=model.machine_fingerprint,
            timestamp=model.timestamp,
            details=model.details or {},
        )

    @sync_to_async
    def append(
        self,
        license_id: Optional[uuid.UUID],
        action: AuditAction,
        fingerprint: Optional[MachineFingerprint] = None,
        details: Optional[Dict] = None,
    ) -> AuditEntry:
        """
        Append an audit entry.

        Args:
            license_id: License UUID, or None for unknown keys
            action: Audited action
            fingerprint: Hashed machine identity, if any
            details: Action-specific details

        Returns:
            Stored AuditEntry
        """
        # pylint: disable=no-member
        model = AuditEntryModel.objects.create(
            license_id=license_id,
            action=action.value,
            machine_fingerprint=str(fingerprint) if fingerprint else None,
            details=details or {},
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_license(self, license_id: uuid.UUID, limit: int = 100) -> List[AuditEntry]:
        """
        List entries for a license, newest first.

        Args:
            license_id: License UUID
            limit: Maximum number of entries

        Returns:
            List of AuditEntry
        """
        # pylint: disable=no-member
        models = AuditEntryModel.objects.filter(license_id=license_id).order_by("-timestamp")[:limit]
        return [self._to_domain(model) for model in models]
