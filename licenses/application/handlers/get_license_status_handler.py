"""
GetLicenseStatusHandler.

Handler for getting license status query.
"""

from activations.application.dto.activation_dto import ActivationDTO
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import LicenseNotFoundError
from licenses.application.dto.license_dto import LicenseDTO, LicenseStatusDTO
from licenses.application.queries.get_license_status import GetLicenseStatusQuery
from licenses.ports.license_repository import LicenseRepository


class GetLicenseStatusHandler:
    """Handler for GetLicenseStatusQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, query: GetLicenseStatusQuery) -> LicenseStatusDTO:
        """
        Handle get license status query.

        Args:
            query: GetLicenseStatusQuery

        Returns:
            LicenseStatusDTO with the license and its activations

        Raises:
            LicenseNotFoundError: If license key not found
        """
        license = await self.license_repository.find_by_key(query.license_key)
        if not license:
            raise LicenseNotFoundError()

        activations = await self.activation_repository.find_all_by_license(license.id)
        return LicenseStatusDTO(
            license=LicenseDTO.from_entity(license),
            activations=[
                ActivationDTO(
                    id=activation.id,
                    license_id=activation.license_id,
                    machine_fingerprint=str(activation.machine_fingerprint),
                    activated_at=activation.activated_at,
                    last_heartbeat=activation.last_heartbeat,
                )
                for activation in activations
            ],
        )
