"""
Integration tests for the Django models: table creation and field validation.
"""

import pytest
from django.apps import apps
from django.contrib import admin
from django.core.exceptions import ValidationError
from django.db import connection

from activations.domain.fingerprint import hash_machine_identity
from activations.infrastructure.models import Activation as ActivationModel
from licenses.admin import LicenseAdmin
from licenses.infrastructure.models import License as LicenseModel
from products.infrastructure.models import Product

APP_TABLES = {
    "customers": "customers",
    "products": "products",
    "licenses": "licenses",
    "activations": "activations",
    "audit": "license_audit_log",
}


@pytest.mark.django_db
@pytest.mark.integration
class TestSchema:
    """Tests that every app's tables are created."""

    @pytest.mark.parametrize("app_label", sorted(APP_TABLES))
    def test_app_registers_models_module(self, app_label):
        assert apps.get_app_config(app_label).models_module is not None

    def test_tables_exist(self):
        tables = set(connection.introspection.table_names())

        assert set(APP_TABLES.values()) <= tables


def _activate(license_model, count):
    for i in range(count):
        ActivationModel.objects.create(  # pylint: disable=no-member
            license=license_model,
            machine_fingerprint=str(hash_machine_identity(f"machine-{i}")),
        )
    LicenseModel.objects.filter(id=license_model.id).update(  # pylint: disable=no-member
        current_activations=count
    )
    license_model.refresh_from_db()


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseModelValidation:
    """Tests for License model validation."""

    def test_max_activations_must_be_positive(self, db_license):
        db_license.max_activations = 0

        with pytest.raises(ValidationError) as exc_info:
            db_license.full_clean()

        assert "max_activations" in exc_info.value.message_dict

    def test_max_activations_below_current_is_rejected(self, make_db_license):
        model = make_db_license(max_activations=3)
        _activate(model, 2)
        model.max_activations = 1

        with pytest.raises(ValidationError) as exc_info:
            model.full_clean()

        assert "max_activations" in exc_info.value.message_dict

    def test_max_activations_equal_to_current_is_allowed(self, make_db_license):
        model = make_db_license(max_activations=3)
        _activate(model, 2)
        model.max_activations = 2

        model.full_clean()

    def test_admin_form_rejects_lowering_below_current(self, rf, admin_user, make_db_license):
        """Test the change form keeps current_activations within the limit."""
        model = make_db_license(max_activations=3)
        _activate(model, 2)
        request = rf.get("/admin/licenses/license/")
        request.user = admin_user
        form_class = LicenseAdmin(LicenseModel, admin.site).get_form(request, obj=model, change=True)
        data = {
            "product": str(model.product_id),
            "customer": str(model.customer_id),
            "status": "active",
            "features": '["export"]',
            "metadata": "{}",
            "expires_at_0": "2030-01-01",
            "expires_at_1": "00:00:00",
        }

        lowered = form_class(data={**data, "max_activations": "1"}, instance=model)
        zero = form_class(data={**data, "max_activations": "0"}, instance=model)
        kept = form_class(data={**data, "max_activations": "2"}, instance=model)

        assert not lowered.is_valid()
        assert "max_activations" in lowered.errors
        assert not zero.is_valid()
        assert "max_activations" in zero.errors
        assert kept.is_valid(), kept.errors


@pytest.mark.django_db
@pytest.mark.integration
class TestProductModelValidation:
    """Tests for Product model validation."""

    def test_default_max_activations_must_be_positive(self):
        with pytest.raises(ValidationError) as exc_info:
            Product.objects.create(name="Viewer", default_max_activations=0)  # pylint: disable=no-member

        assert "default_max_activations" in exc_info.value.message_dict
