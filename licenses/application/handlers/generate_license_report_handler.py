"""
GenerateLicenseReportHandler.

Handler for the license report: totals across all licenses and per product.
"""
import logging

from licenses.application.dto.license_dto import (
    LicenseReportDTO,
    LicenseStatsDTO,
    ProductStatsDTO,
)
from licenses.domain.license import utc_now
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class GenerateLicenseReportHandler:
    """Handler for the license report."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository

    async def handle(self) -> LicenseReportDTO:
        """
        Build the license report.

        A license counts as active when it validates right now and as
        expired when its status or its expiry says so. Suspended and
        revoked licenses are in neither count.

        Returns:
            LicenseReportDTO
        """
        licenses = await self.license_repository.find_all()
        products = await self.product_repository.find_all()

        now = utc_now()
        stats = LicenseStatsDTO(total_products=len(products))
        by_product = {
            product.id: ProductStatsDTO(product_id=product.id, product_name=product.name)
            for product in products
        }
        customers = set()

        for license in licenses:
            active = license.is_valid(now)
            stats.total_licenses += 1
            stats.active_licenses += int(active)
            stats.expired_licenses += int(license.is_expired(now))
            stats.total_activations += license.current_activations
            customers.add(license.customer_id)

            entry = by_product.setdefault(
                license.product_id,
                ProductStatsDTO(product_id=license.product_id, product_name="Unknown"),
            )
            entry.total_count += 1
            entry.active_count += int(active)
            entry.total_activations += license.current_activations

        stats.unique_customers = len(customers)

        logger.info(
            "License report generated",
            extra={
                "total_licenses": stats.total_licenses,
                "active_licenses": stats.active_licenses,
            },
        )
        return LicenseReportDTO(
            stats=stats,
            product_stats=sorted(by_product.values(), key=lambda entry: entry.product_name),
        )
