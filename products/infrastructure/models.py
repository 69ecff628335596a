"""
Product model.
"""
import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    Represents a product that can be licensed.

    Carries the defaults applied when a license is issued without
    explicit activation limit, validity or features.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, help_text="Product display name")
    description = models.TextField(blank=True, default="")
    version = models.CharField(max_length=50, blank=True, default="")
    features = models.JSONField(default=list, blank=True, help_text="Feature flags granted by default")
    default_max_activations = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)]
    )
    default_validity_days = models.PositiveIntegerField(
        default=365, help_text="0 issues perpetual licenses"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]

    def clean(self):
        """Validate product fields."""
        from django.core.exceptions import ValidationError

        if not self.name:
            raise ValidationError("Name is required")
        if self.default_max_activations < 1:
            raise ValidationError("Default max activations must be at least 1")
        if not isinstance(self.features, list):
            raise ValidationError("Features must be a list")

    def save(self, *args, **kwargs):
        """Save product with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        if self.version:
            return f"{self.name} {self.version}"
        return self.name
