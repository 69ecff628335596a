"""
Audit entry Django ORM model.
"""
import uuid

from django.db import models


class AuditEntry(models.Model):
    """
    Append-only record of a validation, activation or deactivation decision.
    """

    ACTION_CHOICES = [
        ("validated", "Validated"),
        ("activated", "Activated"),
        ("validation_failed", "Validation Failed"),
        ("activation_rejected", "Activation Rejected"),
        ("deactivated", "Deactivated"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_entries",
    )
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    machine_fingerprint = models.CharField(max_length=64, null=True, blank=True)
    details = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "license_audit_log"
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["license", "timestamp"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} @ {self.timestamp:%Y-%m-%d %H:%M:%S}"
