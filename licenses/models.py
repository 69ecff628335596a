"""
Django models module for the licenses app.

The model itself lives in licenses.infrastructure.models.
"""
from licenses.infrastructure.models import License  # noqa: F401
