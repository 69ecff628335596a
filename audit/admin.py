"""
Django admin configuration for audit app.
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from audit.infrastructure.models import AuditEntry


@admin.register(AuditEntry)
class AuditEntryAdmin(admin.ModelAdmin):
    """Admin interface for AuditEntry model."""

    list_display = ["timestamp", "action", "license", "fingerprint_display"]
    list_filter = ["action", "timestamp"]
    search_fields = ["license__license_key", "machine_fingerprint"]
    readonly_fields = ["id", "license", "action", "machine_fingerprint", "details_display", "timestamp"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "license", "action", "machine_fingerprint"),
            },
        ),
        (
            "Details",
            {
                "fields": ("details_display", "timestamp"),
            },
        ),
    )

    def fingerprint_display(self, obj):
        if not obj.machine_fingerprint:
            return "-"
        return f"{obj.machine_fingerprint[:12]}…"

    fingerprint_display.short_description = "Machine"

    def details_display(self, obj):
        """Display details in a formatted way."""
        if obj.details:
            return format_html(
                '<pre style="background: #f5f5f5; padding: 10px; '
                'border-radius: 4px; overflow-x: auto;">{}</pre>',
                json.dumps(obj.details, indent=2),
            )
        return "-"

    details_display.short_description = "Details"

    def has_add_permission(self, request):
        """Audit entries are read-only."""
        return False

    def has_change_permission(self, request, obj=None):
        """Audit entries are read-only."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Audit entries should not be deleted."""
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")
