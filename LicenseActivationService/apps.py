"""
App configuration for License Activation Service.
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class LicenseActivationServiceConfig(AppConfig):
    """App configuration for LicenseActivationService."""

    name = "LicenseActivationService"
    verbose_name = "License Activation Service"

    def ready(self):
        """Called when Django starts."""
        # Skip for management commands that never serve traffic
        if len(sys.argv) > 1 and sys.argv[1] in [
            "migrate",
            "makemigrations",
            "collectstatic",
            "shell",
            "test",
            "check",
            "createsuperuser",
            "reconcile_activation_counts",
        ]:
            return

        # RUN_MAIN is "false" in the reloader's parent process
        if os.environ.get("RUN_MAIN") == "false":
            return

        if os.environ.get("OTEL_ENABLED", "false").lower() != "true":
            return

        if not hasattr(self, "_initialized"):
            try:
                logger.info("Setting up observability...")
                from core.instrumentation import setup_opentelemetry

                setup_opentelemetry()
                self._initialized = True
                logger.info("Observability setup complete")
            except Exception as e:  # pylint: disable=broad-exception-caught
                # The service still starts without tracing
                logger.error(f"Error in AppConfig.ready(): {e}", exc_info=True)
