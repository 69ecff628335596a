"""
Django models module for the audit app.

The model itself lives in audit.infrastructure.models.
"""
from audit.infrastructure.models import AuditEntry  # noqa: F401
