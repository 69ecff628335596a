"""
Django admin configuration for licenses app.
"""
from asgiref.sync import async_to_sync
from django.contrib import admin, messages
from django.utils.html import format_html

from activations.application.handlers.reconcile_activations_handler import (
    ReconcileActivationsHandler,
)
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.domain.exceptions import DomainException
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.handlers.license_lifecycle_handlers import (
    ResumeLicenseHandler,
    RevokeLicenseHandler,
    SuspendLicenseHandler,
)
from licenses.infrastructure.models import License
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Fields the admin form may write; the activation counter is never among them
EDITABLE_FIELDS = [
    "product",
    "customer",
    "status",
    "max_activations",
    "features",
    "metadata",
    "expires_at",
    "updated_at",
]


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "license_key",
        "product",
        "customer",
        "status_display",
        "max_activations",
        "current_activations",
        "expires_at",
        "created_at",
    ]
    list_filter = ["status", "expires_at", "created_at", "product"]
    search_fields = [
        "license_key",
        "customer__email",
        "customer__name",
        "product__name",
    ]
    readonly_fields = [
        "id",
        "license_key",
        "current_activations",
        "issued_at",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "license_key", "product", "customer", "status"),
            },
        ),
        (
            "Activations",
            {
                "fields": ("max_activations", "current_activations"),
            },
        ),
        (
            "Entitlements",
            {
                "fields": ("features", "metadata"),
            },
        ),
        (
            "Expiration",
            {
                "fields": ("issued_at", "expires_at"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
    actions = ["suspend_licenses", "resume_licenses", "revoke_licenses", "reconcile_activations"]

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "active": "green",
            "suspended": "orange",
            "revoked": "red",
            "expired": "gray",
        }
        color = colors.get(obj.status, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.status.upper(),
        )

    status_display.short_description = "Status"

    def save_model(self, request, obj, form, change):
        """Save without overwriting the activation counter."""
        if change:
            obj.save(update_fields=EDITABLE_FIELDS)
        else:
            obj.current_activations = 0
            obj.save()

    def _run(self, request, queryset, handler, command_class, verb):
        done = 0
        for license in queryset:
            try:
                async_to_sync(handler.handle)(command_class(license_key=license.license_key))
                done += 1
            except DomainException as e:
                self.message_user(request, f"{license.license_key}: {e.message}", messages.WARNING)
        if done:
            self.message_user(request, f"{done} license(s) {verb}.", messages.SUCCESS)

    @admin.action(description="Suspend selected licenses")
    def suspend_licenses(self, request, queryset):
        handler = SuspendLicenseHandler(DjangoLicenseRepository())
        self._run(request, queryset, handler, SuspendLicenseCommand, "suspended")

    @admin.action(description="Resume selected licenses")
    def resume_licenses(self, request, queryset):
        handler = ResumeLicenseHandler(DjangoLicenseRepository())
        self._run(request, queryset, handler, ResumeLicenseCommand, "resumed")

    @admin.action(description="Revoke selected licenses")
    def revoke_licenses(self, request, queryset):
        handler = RevokeLicenseHandler(DjangoLicenseRepository())
        self._run(request, queryset, handler, RevokeLicenseCommand, "revoked")

    @admin.action(description="Reconcile activation counts")
    def reconcile_activations(self, request, queryset):
        handler = ReconcileActivationsHandler(DjangoLicenseRepository(), DjangoActivationRepository())
        corrected = 0
        for license in queryset:
            if async_to_sync(handler.handle)(license.license_key).changed:
                corrected += 1
        self.message_user(request, f"{corrected} activation counter(s) corrected.", messages.INFO)

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product", "customer")
