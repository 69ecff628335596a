"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import License, utc_now


@dataclass(frozen=True)
class LicenseState:
    """Result of evaluating a license at a point in time."""

    usable: bool
    reason: Optional[str] = None


class LicenseStateEvaluator:
    """Domain service deciding whether a license may be used right now."""

    @staticmethod
    def evaluate(license: License, current_time: Optional[datetime] = None) -> LicenseState:
        """
        Evaluate a license at request-processing time.

        Args:
            license: License entity to evaluate
            current_time: Evaluation time (defaults to now)

        Returns:
            LicenseState with the failure reason when not usable
        """
        reason = license.invalid_reason(current_time or utc_now())
        return LicenseState(usable=reason is None, reason=reason)


class LicenseLifecycleManager:
    """Domain service for managing license lifecycle."""

    @staticmethod
    async def renew_license(
        license: License,
        new_expiration: datetime,
        repository: "LicenseRepository",  # noqa: F821
    ) -> License:
        """
        Renew a license.

        Args:
            license: License entity to renew
            new_expiration: New expiration datetime
            repository: License repository

        Returns:
            Renewed license entity
        """
        renewed = license.renew(new_expiration)
        return await repository.save(renewed)

    @staticmethod
    async def suspend_license(
        license: License,
        repository: "LicenseRepository",  # noqa: F821
    ) -> License:
        """
        Suspend a license.

        Args:
            license: License entity to suspend
            repository: License repository

        Returns:
            Suspended license entity
        """
        suspended = license.suspend()
        return await repository.save(suspended)

    @staticmethod
    async def resume_license(
        license: License,
        repository: "LicenseRepository",  # noqa: F821
    ) -> License:
        """
        Resume a license.

        Args:
            license: License entity to resume
            repository: License repository

        Returns:
            Resumed license entity
        """
        resumed = license.resume()
        return await repository.save(resumed)

    @staticmethod
    async def revoke_license(
        license: License,
        repository: "LicenseRepository",  # noqa: F821
    ) -> License:
        """
        Revoke a license. Revocation cannot be undone.

        Args:
            license: License entity to revoke
            repository: License repository

        Returns:
            Revoked license entity
        """
        revoked = license.revoke()
        return await repository.save(revoked)
