"""
License lifecycle handlers.

Handlers for renew, suspend, resume, and revoke license commands.
None of them touch the activation counter; a license regaining the
active status keeps the machines it had.
"""
import logging

from core.domain.exceptions import LicenseNotFoundError
from core.metrics import license_status_changes_total
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.domain.license import License
from licenses.domain.services import LicenseLifecycleManager
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


async def _load(repository: LicenseRepository, license_key: str) -> License:
    license = await repository.find_by_key(license_key)
    if not license:
        raise LicenseNotFoundError()
    return license


def _record(action: str, license: License) -> None:
    license_status_changes_total.labels(action=action).inc()
    logger.info(
        f"License {action}",
        extra={"license_id": str(license.id), "status": license.status.value},
    )


class RenewLicenseHandler:
    """Handler for RenewLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: RenewLicenseCommand) -> License:
        """
        Handle renew license command.

        Args:
            command: RenewLicenseCommand

        Returns:
            Renewed License entity

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is revoked
            InvalidExpiryError: If the new expiry is not in the future
        """
        license = await _load(self.license_repository, command.license_key)
        renewed = await LicenseLifecycleManager.renew_license(
            license, command.expiration_date, self.license_repository
        )
        _record("renewed", renewed)
        return renewed


class SuspendLicenseHandler:
    """Handler for SuspendLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: SuspendLicenseCommand) -> License:
        """
        Handle suspend license command.

        Args:
            command: SuspendLicenseCommand

        Returns:
            Suspended License entity

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is revoked
        """
        license = await _load(self.license_repository, command.license_key)
        suspended = await LicenseLifecycleManager.suspend_license(license, self.license_repository)
        _record("suspended", suspended)
        return suspended


class ResumeLicenseHandler:
    """Handler for ResumeLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: ResumeLicenseCommand) -> License:
        """
        Handle resume license command.

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is not suspended
        """
        license = await _load(self.license_repository, command.license_key)
        resumed = await LicenseLifecycleManager.resume_license(license, self.license_repository)
        _record("resumed", resumed)
        return resumed


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: RevokeLicenseCommand) -> License:
        """
        Handle revoke license command.

        Raises:
            LicenseNotFoundError: If license not found
            InvalidLicenseStatusError: If the license is already revoked
        """
        license = await _load(self.license_repository, command.license_key)
        revoked = await LicenseLifecycleManager.revoke_license(license, self.license_repository)
        _record("revoked", revoked)
        return revoked
