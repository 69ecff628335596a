"""
Product repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from products.domain.product import Product


class ProductRepository(ABC):
    """
    Abstract repository for Product entities.

    Products are maintained through the Django admin; the engine only
    reads them.
    """

    @abstractmethod
    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        pass

    @abstractmethod
    async def find_all(self) -> List[Product]:
        """
        List all products.

        Returns:
            List of Product entities
        """
        pass
