"""
IssueLicenseHandler.

Handler for issuing a new license.
"""
import logging

from core.domain.exceptions import CustomerNotFoundError, InvalidExpiryError, ProductNotFoundError
from core.metrics import licenses_issued_total
from customers.ports.customer_repository import CustomerRepository
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.domain.license import License, utc_now
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        customer_repository: CustomerRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.customer_repository = customer_repository

    async def handle(self, command: IssueLicenseCommand) -> License:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            Issued License entity

        Raises:
            ProductNotFoundError: If product not found
            CustomerNotFoundError: If customer not found
            InvalidExpiryError: If the expiry is not in the future
        """
        product = await self.product_repository.find_by_id(command.product_id)
        if not product:
            raise ProductNotFoundError(f"Product {command.product_id} not found")

        customer = await self.customer_repository.find_by_id(command.customer_id)
        if not customer:
            raise CustomerNotFoundError(f"Customer {command.customer_id} not found")

        now = utc_now()
        if command.perpetual:
            expires_at = None
        elif command.expires_at is not None:
            if command.expires_at <= now:
                raise InvalidExpiryError()
            expires_at = command.expires_at
        else:
            expires_at = product.default_expiry(now)

        features = (
            command.features if command.features is not None else product.features
        )
        license = License.create(
            product_id=product.id,
            customer_id=customer.id,
            max_activations=command.max_activations or product.default_max_activations,
            expires_at=expires_at,
            features=features,
            metadata=command.metadata,
        )
        saved = await self.license_repository.save(license)

        licenses_issued_total.labels(product_id=str(product.id)).inc()
        logger.info(
            "License issued",
            extra={
                "license_id": str(saved.id),
                "product_id": str(product.id),
                "customer_id": str(customer.id),
                "max_activations": saved.max_activations,
            },
        )
        return saved
