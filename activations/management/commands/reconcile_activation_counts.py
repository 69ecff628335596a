"""
Django management command to reconcile license activation counters.

Recounts the activation rows of each license and corrects the stored
counter where it drifted. Safe to run while validations are served.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from activations.application.handlers.reconcile_activations_handler import (
    ReconcileActivationsHandler,
)
from activations.infrastructure.models import Activation as ActivationModel
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.domain.exceptions import LicenseNotFoundError
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to reconcile activation counters."""

    help = "Recount activations and correct drifted license counters"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - report drift without correcting it",
        )
        parser.add_argument(
            "--license-key",
            help="Only reconcile this license",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        license_key = options.get("license_key")

        # pylint: disable=no-member
        queryset = LicenseModel.objects.order_by("created_at")
        if license_key:
            queryset = queryset.filter(license_key=license_key)
            if not queryset.exists():
                raise CommandError(f"License {license_key} not found")

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            drifted = 0
            for license in queryset:
                actual = ActivationModel.objects.filter(license_id=license.id).count()
                if actual != license.current_activations:
                    drifted += 1
                    self.stdout.write(
                        f"  - License {license.license_key}: "
                        f"counter {license.current_activations}, rows {actual}"
                    )
            self.stdout.write(f"Found {drifted} drifted license(s)")
            return

        handler = ReconcileActivationsHandler(
            license_repository=DjangoLicenseRepository(),
            activation_repository=DjangoActivationRepository(),
        )
        keys = list(queryset.values_list("license_key", flat=True))

        corrected = 0
        for key in keys:
            try:
                result = async_to_sync(handler.handle)(key)
            except LicenseNotFoundError:
                # Deleted after the key list was taken
                continue
            if result.changed:
                corrected += 1
                self.stdout.write(
                    f"  - License {result.license_key}: {result.previous} -> {result.actual}"
                )

        logger.info("Activation counters reconciled", extra={"checked": len(keys), "corrected": corrected})
        self.stdout.write(
            self.style.SUCCESS(f"Checked {len(keys)} license(s), corrected {corrected}")
        )
