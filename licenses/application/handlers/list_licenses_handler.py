"""
ListLicensesHandler.

Handler for listing licenses, optionally by customer email.
"""

from typing import Dict, List

from customers.ports.customer_repository import CustomerRepository
from licenses.application.dto.license_dto import LicenseListItemDTO
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.domain.license import utc_now
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        customer_repository: CustomerRepository,
        product_repository: ProductRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.customer_repository = customer_repository
        self.product_repository = product_repository

    async def handle(self, query: ListLicensesQuery) -> List[LicenseListItemDTO]:
        """
        Handle list licenses query.

        An email that matches no customer gives an empty list.

        Args:
            query: ListLicensesQuery

        Returns:
            List of LicenseListItemDTO
        """
        if query.customer_email:
            customer = await self.customer_repository.find_by_email(query.customer_email)
            if not customer:
                return []
            licenses = await self.license_repository.find_by_customer(customer.id)
            emails = {customer.id: str(customer.email)}
        else:
            licenses = await self.license_repository.find_all()
            emails = {}

        product_names: Dict = {}
        now = utc_now()
        items = []

        for license in licenses:
            if license.product_id not in product_names:
                product = await self.product_repository.find_by_id(license.product_id)
                product_names[license.product_id] = product.name if product else "Unknown"

            if license.customer_id not in emails:
                customer = await self.customer_repository.find_by_id(license.customer_id)
                emails[license.customer_id] = str(customer.email) if customer else ""

            items.append(
                LicenseListItemDTO(
                    license_key=license.license_key,
                    product_name=product_names[license.product_id],
                    customer_email=emails[license.customer_id],
                    status=license.status.value,
                    is_valid=license.is_valid(now),
                    expires_at=license.expires_at,
                    current_activations=license.current_activations,
                    max_activations=license.max_activations,
                )
            )

        return items
