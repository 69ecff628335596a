"""
Django admin configuration for activations app.
"""

from django.contrib import admin

from activations.infrastructure.models import Activation


@admin.register(Activation)
class ActivationAdmin(admin.ModelAdmin):
    """
    Read-only admin interface for Activation model.

    Rows are created and deleted only by the activation engine so that
    license counters stay in step.
    """

    list_display = [
        "license",
        "fingerprint_display",
        "activated_at",
        "last_heartbeat",
    ]
    list_filter = ["activated_at", "last_heartbeat"]
    search_fields = ["machine_fingerprint", "license__license_key", "license__customer__email"]
    readonly_fields = [
        "id",
        "license",
        "machine_fingerprint",
        "client_info",
        "activated_at",
        "last_heartbeat",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "license", "machine_fingerprint"),
            },
        ),
        (
            "Client",
            {
                "fields": ("client_info",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("activated_at", "last_heartbeat"),
            },
        ),
    )

    def fingerprint_display(self, obj):
        """Shortened fingerprint."""
        return f"{obj.machine_fingerprint[:12]}…"

    fingerprint_display.short_description = "Machine"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")
