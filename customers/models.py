"""
Django models module for the customers app.

The model itself lives in customers.infrastructure.models.
"""
from customers.infrastructure.models import Customer  # noqa: F401
