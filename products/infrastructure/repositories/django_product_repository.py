"""
Django implementation of ProductRepository port.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from products.domain.product import Product
from products.infrastructure.models import Product as ProductModel
from products.ports.product_repository import ProductRepository


class DjangoProductRepository(ProductRepository):
    """Django ORM implementation of ProductRepository."""

    def _to_domain(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            version=model.version,
            features=frozenset(model.features or []),
            default_max_activations=model.default_max_activations,
            default_validity_days=model.default_validity_days,
        )

    @sync_to_async
    def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        try:
            # pylint: disable=no-member
            return self._to_domain(ProductModel.objects.get(id=product_id))
        except ProductModel.DoesNotExist:  # pylint: disable=no-member
            return None

    @sync_to_async
    def find_all(self) -> List[Product]:
        """List all products ordered by name."""
        return [self._to_domain(model) for model in ProductModel.objects.all()]  # pylint: disable=no-member
