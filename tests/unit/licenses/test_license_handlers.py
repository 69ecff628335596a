"""
Unit tests for license issuing and lifecycle handlers.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from activations.application.commands.validate_license import ValidateLicenseCommand
from core.domain.exceptions import (
    CustomerNotFoundError,
    InvalidExpiryError,
    InvalidLicenseStatusError,
    LicenseNotFoundError,
    ProductNotFoundError,
)
from core.domain.value_objects import Email, LicenseStatus
from customers.domain.customer import Customer
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RenewLicenseHandler,
    ResumeLicenseHandler,
    RevokeLicenseHandler,
    SuspendLicenseHandler,
)
from products.domain.product import Product


def _product(validity_days=365):
    return Product(
        id=uuid.uuid4(),
        name="Studio Pro",
        version="5.1",
        features=frozenset({"export", "render"}),
        default_max_activations=3,
        default_validity_days=validity_days,
    )


def _customer():
    return Customer(id=uuid.uuid4(), name="Ada Lovelace", email=Email("ada@example.com"))


@pytest.fixture
def product(product_repository):
    return product_repository.add(_product())


@pytest.fixture
def customer(customer_repository):
    return customer_repository.add(_customer())


@pytest.fixture
def issue_handler(license_repository, product_repository, customer_repository):
    return IssueLicenseHandler(
        license_repository=license_repository,
        product_repository=product_repository,
        customer_repository=customer_repository,
    )


@pytest.mark.asyncio
class TestIssueLicenseHandler:
    """Tests for IssueLicenseHandler."""

    async def test_issue_with_product_defaults(self, issue_handler, product, customer):
        """Test omitted values come from the product."""
        license = await issue_handler.handle(
            IssueLicenseCommand(product_id=product.id, customer_id=customer.id)
        )

        assert license.status == LicenseStatus.ACTIVE
        assert license.max_activations == 3
        assert license.current_activations == 0
        assert license.features == frozenset({"export", "render"})
        expected = datetime.now(timezone.utc) + timedelta(days=365)
        assert abs((license.expires_at - expected).total_seconds()) < 5

    async def test_issue_with_explicit_values(
        self, issue_handler, license_repository, product, customer
    ):
        expires_at = datetime.now(timezone.utc) + timedelta(days=30)

        license = await issue_handler.handle(
            IssueLicenseCommand(
                product_id=product.id,
                customer_id=customer.id,
                expires_at=expires_at,
                max_activations=1,
                features=["export"],
                metadata={"order": "A-1001"},
            )
        )

        assert license.expires_at == expires_at
        assert license.max_activations == 1
        assert license.features == frozenset({"export"})
        assert license.metadata == {"order": "A-1001"}
        assert await license_repository.find_by_key(license.license_key) == license

    async def test_issue_perpetual(self, issue_handler, product, customer):
        license = await issue_handler.handle(
            IssueLicenseCommand(product_id=product.id, customer_id=customer.id, perpetual=True)
        )

        assert license.expires_at is None

    async def test_product_without_validity_issues_perpetual(
        self, issue_handler, product_repository, customer
    ):
        product = product_repository.add(_product(validity_days=0))

        license = await issue_handler.handle(
            IssueLicenseCommand(product_id=product.id, customer_id=customer.id)
        )

        assert license.is_perpetual

    async def test_issue_past_expiry(self, issue_handler, product, customer):
        with pytest.raises(InvalidExpiryError):
            await issue_handler.handle(
                IssueLicenseCommand(
                    product_id=product.id,
                    customer_id=customer.id,
                    expires_at=datetime.now(timezone.utc) - timedelta(days=1),
                )
            )

    async def test_product_not_found(self, issue_handler, customer):
        with pytest.raises(ProductNotFoundError):
            await issue_handler.handle(
                IssueLicenseCommand(product_id=uuid.uuid4(), customer_id=customer.id)
            )

    async def test_customer_not_found(self, issue_handler, product):
        with pytest.raises(CustomerNotFoundError):
            await issue_handler.handle(
                IssueLicenseCommand(product_id=product.id, customer_id=uuid.uuid4())
            )

    async def test_keys_are_unique(self, issue_handler, product, customer):
        command = IssueLicenseCommand(product_id=product.id, customer_id=customer.id)

        first = await issue_handler.handle(command)
        second = await issue_handler.handle(command)

        assert first.license_key != second.license_key
        assert first.id != second.id


@pytest.mark.asyncio
class TestLifecycleHandlers:
    """Tests for suspend, resume, revoke and renew handlers."""

    async def test_suspend_and_resume(self, make_license, license_repository):
        license = make_license()

        suspended = await SuspendLicenseHandler(license_repository).handle(
            SuspendLicenseCommand(license_key=license.license_key)
        )
        resumed = await ResumeLicenseHandler(license_repository).handle(
            ResumeLicenseCommand(license_key=license.license_key)
        )

        assert suspended.status == LicenseStatus.SUSPENDED
        assert resumed.status == LicenseStatus.ACTIVE

    async def test_resume_keeps_activations(self, make_license, license_repository, validate_handler):
        """Test a resumed license keeps the machines it had."""
        license = make_license(max_activations=2)
        await validate_handler.handle(
            ValidateLicenseCommand(license_key=license.license_key, machine_id="machine-A")
        )

        await SuspendLicenseHandler(license_repository).handle(
            SuspendLicenseCommand(license_key=license.license_key)
        )
        resumed = await ResumeLicenseHandler(license_repository).handle(
            ResumeLicenseCommand(license_key=license.license_key)
        )

        assert resumed.current_activations == 1

    async def test_revoke(self, make_license, license_repository):
        license = make_license()

        revoked = await RevokeLicenseHandler(license_repository).handle(
            RevokeLicenseCommand(license_key=license.license_key)
        )

        assert revoked.status == LicenseStatus.REVOKED
        with pytest.raises(InvalidLicenseStatusError):
            await ResumeLicenseHandler(license_repository).handle(
                ResumeLicenseCommand(license_key=license.license_key)
            )

    async def test_renew(self, make_license, license_repository):
        license = make_license(expires_in=timedelta(days=-1))
        new_expiry = datetime.now(timezone.utc) + timedelta(days=90)

        renewed = await RenewLicenseHandler(license_repository).handle(
            RenewLicenseCommand(license_key=license.license_key, expiration_date=new_expiry)
        )

        assert renewed.expires_at == new_expiry
        assert renewed.is_valid()

    async def test_unknown_license(self, license_repository):
        with pytest.raises(LicenseNotFoundError):
            await SuspendLicenseHandler(license_repository).handle(
                SuspendLicenseCommand(license_key="ZZZZ-ZZZZ-ZZZZ-ZZZZ")
            )
