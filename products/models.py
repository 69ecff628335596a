"""
Django models module for the products app.

The model itself lives in products.infrastructure.models.
"""
from products.infrastructure.models import Product  # noqa: F401
