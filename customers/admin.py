"""
Django admin configuration for customers app.
"""

from django.contrib import admin

from customers.infrastructure.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer model."""

    list_display = ["name", "email", "company", "license_count", "created_at"]
    search_fields = ["name", "email", "company"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "email", "company"),
            },
        ),
        (
            "Contact",
            {
                "fields": ("phone", "address", "metadata"),
                "classes": ("collapse",),
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

    def license_count(self, obj):
        """Display number of licenses held by this customer."""
        return obj.licenses.count()

    license_count.short_description = "Licenses"
