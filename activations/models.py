"""
Django models module for the activations app.

The model itself lives in activations.infrastructure.models.
"""
from activations.infrastructure.models import Activation  # noqa: F401
