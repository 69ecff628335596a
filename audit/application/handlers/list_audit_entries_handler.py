"""
ListAuditEntriesHandler.

Handler for listing the audit trail of a license.
"""
from typing import List

from audit.application.dto.audit_dto import AuditEntryDTO
from audit.ports.audit_repository import AuditRepository
from core.domain.exceptions import LicenseNotFoundError
from licenses.ports.license_repository import LicenseRepository

MAX_AUDIT_ENTRIES = 1000


class ListAuditEntriesHandler:
    """Lists audit entries for a license, newest first."""

    def __init__(self, license_repository: LicenseRepository, audit_repository: AuditRepository):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.audit_repository = audit_repository

    async def handle(self, license_key: str, limit: int = 100) -> List[AuditEntryDTO]:
        """
        Args:
            license_key: License key
            limit: Maximum number of entries (capped at 1000)

        Returns:
            List of AuditEntryDTO

        Raises:
            LicenseNotFoundError: If license key not found
        """
        license = await self.license_repository.find_by_key(license_key)
        if not license:
            raise LicenseNotFoundError()

        limit = max(1, min(limit, MAX_AUDIT_ENTRIES))
        entries = await self.audit_repository.find_by_license(license.id, limit)
        return [
            AuditEntryDTO(
                id=entry.id,
                action=entry.action.value,
                machine_fingerprint=entry.machine_fingerprint,
                timestamp=entry.timestamp,
                details=entry.details,
            )
            for entry in entries
        ]
