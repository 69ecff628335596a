"""
Audit repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import uuid

from audit.domain.audit_entry import AuditEntry
from core.domain.value_objects import AuditAction, MachineFingerprint


class AuditRepository(ABC):
    """
    Abstract append-only store for audit entries.

    There is no update or delete operation.
    """

    @abstractmethod
    async def append(
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
        pass

    @abstractmethod
    async def find_by_license(self, license_id: uuid.UUID, limit: int = 100) -> List[AuditEntry]:
        """
        List entries for a license, newest first.

        Args:
            license_id: License UUID
            limit: Maximum number of entries

        Returns:
            List of AuditEntry
        """
        pass
