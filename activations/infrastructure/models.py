"""
Activation Django ORM model.

This is the infrastructure layer model for activations.
Domain entities are in activations.domain.activation.
"""
import uuid

from django.db import models


class Activation(models.Model):
    """
    A machine currently holding one activation slot of a license.

    The row exists exactly while the slot is held; deactivation deletes it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="activations",
    )
    machine_fingerprint = models.CharField(
        max_length=64, help_text="SHA-256 of the machine identity"
    )
    client_info = models.JSONField(
        default=dict,
        blank=True,
        help_text="Client metadata reported at activation",
    )
    activated_at = models.DateTimeField(auto_now_add=True)
    last_heartbeat = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "activations"
        unique_together = [["license", "machine_fingerprint"]]
        ordering = ["-activated_at"]
        indexes = [
            models.Index(fields=["license", "last_heartbeat"]),
        ]

    def __str__(self):
        return f"{self.license.license_key} @ {self.machine_fingerprint[:12]}"
