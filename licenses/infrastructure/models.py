"""
License Django ORM model.

This is the infrastructure layer model for licenses.
Domain entities are in licenses.domain.license.
"""
import uuid

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from licenses.domain.license_key import generate_license_key


class License(models.Model):
    """
    A license grants a customer the right to run a product on a
    bounded number of machines.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("expired", "Expired"),
        ("suspended", "Suspended"),
        ("revoked", "Revoked"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.CharField(
        max_length=19, unique=True, db_index=True, default=generate_license_key
    )
    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="licenses"
    )
    customer = models.ForeignKey(
        "customers.Customer", on_delete=models.PROTECT, related_name="licenses"
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    max_activations = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text="Maximum number of concurrent machine activations",
    )
    current_activations = models.PositiveIntegerField(
        default=0, help_text="Maintained by the activation engine"
    )
    features = models.JSONField(default=list, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    issued_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True, help_text="Empty for perpetual")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["customer", "status"]),
            models.Index(fields=["expires_at"]),
        ]

    def clean(self):
        """Keep the ceiling at or above the machines already activated."""
        if self.max_activations is not None and self.max_activations < self.current_activations:
            raise ValidationError(
                {
                    "max_activations": (
                        f"{self.current_activations} machine(s) are activated; "
                        "deactivate some before lowering the limit"
                    )
                }
            )

    def __str__(self):
        return self.license_key
