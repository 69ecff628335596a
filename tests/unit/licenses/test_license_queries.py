"""
Unit tests for license listing and reporting handlers.
"""

import uuid
from dataclasses import replace
from datetime import timedelta

import pytest

from core.domain.value_objects import Email, LicenseStatus
from customers.domain.customer import Customer
from licenses.application.handlers.generate_license_report_handler import (
    GenerateLicenseReportHandler,
)
from licenses.application.handlers.list_licenses_handler import ListLicensesHandler
from licenses.application.queries.list_licenses import ListLicensesQuery
from products.domain.product import Product


def _product(name):
    return Product(
        id=uuid.uuid4(),
        name=name,
        version="1.0",
        features=frozenset(),
        default_max_activations=2,
        default_validity_days=365,
    )


@pytest.fixture
def catalog(product_repository, customer_repository):
    studio = product_repository.add(_product("Studio Pro"))
    viewer = product_repository.add(_product("Viewer"))
    ada = customer_repository.add(
        Customer(id=uuid.uuid4(), name="Ada Lovelace", email=Email("ada@example.com"))
    )
    alan = customer_repository.add(
        Customer(id=uuid.uuid4(), name="Alan Turing", email=Email("alan@example.com"))
    )
    return {"studio": studio, "viewer": viewer, "ada": ada, "alan": alan}


@pytest.fixture
def list_handler(license_repository, customer_repository, product_repository):
    return ListLicensesHandler(
        license_repository=license_repository,
        customer_repository=customer_repository,
        product_repository=product_repository,
    )


@pytest.fixture
def report_handler(license_repository, product_repository):
    return GenerateLicenseReportHandler(
        license_repository=license_repository,
        product_repository=product_repository,
    )


@pytest.mark.asyncio
class TestListLicensesHandler:
    """Tests for ListLicensesHandler."""

    async def test_list_by_email(self, list_handler, make_license, catalog):
        """Test only the customer's licenses are listed."""
        owned = make_license(product_id=catalog["studio"].id, customer_id=catalog["ada"].id)
        make_license(product_id=catalog["viewer"].id, customer_id=catalog["alan"].id)

        items = await list_handler.handle(ListLicensesQuery(customer_email="ADA@example.com"))

        assert [item.license_key for item in items] == [owned.license_key]
        assert items[0].product_name == "Studio Pro"
        assert items[0].customer_email == "ada@example.com"
        assert items[0].status == "active"
        assert items[0].is_valid is True
        assert items[0].max_activations == 2

    async def test_unknown_email(self, list_handler, make_license, catalog):
        make_license(product_id=catalog["studio"].id, customer_id=catalog["ada"].id)

        assert await list_handler.handle(ListLicensesQuery(customer_email="nobody@example.com")) == []

    async def test_list_all(self, list_handler, make_license, catalog):
        make_license(product_id=catalog["studio"].id, customer_id=catalog["ada"].id)
        make_license(product_id=catalog["viewer"].id, customer_id=catalog["alan"].id)

        items = await list_handler.handle(ListLicensesQuery())

        assert {item.customer_email for item in items} == {"ada@example.com", "alan@example.com"}
        assert {item.product_name for item in items} == {"Studio Pro", "Viewer"}


@pytest.mark.asyncio
class TestGenerateLicenseReportHandler:
    """Tests for GenerateLicenseReportHandler."""

    async def test_report_totals(
        self, report_handler, make_license, license_repository, catalog
    ):
        """Test totals across active, expired and suspended licenses."""
        studio, viewer = catalog["studio"].id, catalog["viewer"].id
        ada, alan = catalog["ada"].id, catalog["alan"].id

        active = make_license(product_id=studio, customer_id=ada)
        license_repository.set_counter(active.id, 2)
        make_license(product_id=studio, customer_id=ada, expires_in=timedelta(seconds=-1))
        stored_expired = make_license(product_id=viewer, customer_id=alan)
        license_repository.licenses[stored_expired.id] = replace(
            stored_expired, status=LicenseStatus.EXPIRED
        )
        suspended = make_license(product_id=viewer, customer_id=alan)
        license_repository.licenses[suspended.id] = suspended.suspend()

        report = await report_handler.handle()

        assert report.stats.total_licenses == 4
        assert report.stats.active_licenses == 1
        assert report.stats.expired_licenses == 2
        assert report.stats.unique_customers == 2
        assert report.stats.total_products == 2
        assert report.stats.total_activations == 2

        by_name = {entry.product_name: entry for entry in report.product_stats}
        assert [entry.product_name for entry in report.product_stats] == ["Studio Pro", "Viewer"]
        assert (by_name["Studio Pro"].total_count, by_name["Studio Pro"].active_count) == (2, 1)
        assert by_name["Studio Pro"].total_activations == 2
        assert (by_name["Viewer"].total_count, by_name["Viewer"].active_count) == (2, 0)

    async def test_empty_report(self, report_handler, catalog):
        report = await report_handler.handle()

        assert report.stats.total_licenses == 0
        assert report.stats.total_products == 2
        assert all(entry.total_count == 0 for entry in report.product_stats)
