"""
Pytest configuration and shared fixtures.

The in-memory repositories below serialize slot changes per license with
an asyncio.Lock and yield inside the critical section, so concurrent
coroutines interleave the way concurrent requests do.
"""

import asyncio
import uuid
from collections import defaultdict
from dataclasses import replace
from datetime import timedelta
from typing import Dict, List, Optional

import pytest
from django.utils import timezone

from activations.application.handlers.deactivate_machine_handler import DeactivateMachineHandler
from activations.application.handlers.validate_license_handler import ValidateLicenseHandler
from activations.domain.activation import Activation, SlotAllocation
from activations.infrastructure.jwt_attestation_signer import JWTAttestationSigner
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from activations.ports.activation_repository import ActivationRepository
from audit.domain.audit_entry import AuditEntry
from audit.infrastructure.repositories.django_audit_repository import DjangoAuditRepository
from audit.ports.audit_repository import AuditRepository
from core.domain.value_objects import AuditAction, MachineFingerprint
from customers.domain.customer import Customer
from customers.ports.customer_repository import CustomerRepository
from licenses.domain.license import License, utc_now
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.ports.license_repository import LicenseRepository
from products.domain.product import Product
from products.ports.product_repository import ProductRepository

TEST_SIGNING_KEY = "unit-test-signing-key-with-enough-entropy"


class InMemoryLicenseRepository(LicenseRepository):
    """License repository backed by a dict."""

    def __init__(self):
        self.licenses: Dict[uuid.UUID, License] = {}

    async def save(self, license: License) -> License:
        stored = self.licenses.get(license.id)
        if stored is not None:
            # The counter is owned by the activation repository
            license = replace(license, current_activations=stored.current_activations)
        self.licenses[license.id] = license
        return license

    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        return self.licenses.get(license_id)

    async def find_by_key(self, license_key: str) -> Optional[License]:
        for license in self.licenses.values():
            if license.license_key == license_key:
                return license
        return None

    async def find_all(self) -> List[License]:
        return list(self.licenses.values())

    async def find_by_customer(self, customer_id: uuid.UUID) -> List[License]:
        return [license for license in self.licenses.values() if license.customer_id == customer_id]

    def adjust_counter(self, license_id: uuid.UUID, delta: int) -> bool:
        """Bounded counter change used by the activation repository."""
        license = self.licenses.get(license_id)
        if license is None:
            return False
        count = license.current_activations + delta
        if count < 0 or count > license.max_activations:
            return False
        self.licenses[license_id] = replace(license, current_activations=count)
        return True

    def set_counter(self, license_id: uuid.UUID, value: int) -> None:
        """Force the stored counter, simulating drift."""
        self.licenses[license_id] = replace(self.licenses[license_id], current_activations=value)


class InMemoryActivationRepository(ActivationRepository):
    """Activation repository keeping rows per license."""

    def __init__(self, license_repository: InMemoryLicenseRepository):
        self.license_repository = license_repository
        self.rows: Dict[uuid.UUID, Activation] = {}
        self._locks: Dict[uuid.UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def find_by_license_and_fingerprint(
        self, license_id: uuid.UUID, fingerprint: MachineFingerprint
    ) -> Optional[Activation]:
        for row in self.rows.values():
            if row.license_id == license_id and row.machine_fingerprint == fingerprint:
                return row
        return None

    async def update_heartbeat(self, activation_id: uuid.UUID) -> Optional[Activation]:
        row = self.rows.get(activation_id)
        if row is None:
            return None
        row = replace(row, last_heartbeat=utc_now())
        self.rows[activation_id] = row
        return row

    async def find_all_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        return [row for row in self.rows.values() if row.license_id == license_id]

    async def count_by_license(self, license_id: uuid.UUID) -> int:
        return len(await self.find_all_by_license(license_id))

    async def allocate(self, license_id, fingerprint, client_info=None):
        async with self._locks[license_id]:
            existing = await self.find_by_license_and_fingerprint(license_id, fingerprint)
            await asyncio.sleep(0)
            if existing:
                return SlotAllocation(
                    activation=await self.update_heartbeat(existing.id), created=False
                )
            if not self.license_repository.adjust_counter(license_id, 1):
                return None
            now = utc_now()
            activation = Activation(
                id=uuid.uuid4(),
                license_id=license_id,
                machine_fingerprint=fingerprint,
                activated_at=now,
                last_heartbeat=now,
                client_info=client_info or {},
            )
            self.rows[activation.id] = activation
            return SlotAllocation(activation=activation, created=True)

    async def release(self, license_id, fingerprint):
        async with self._locks[license_id]:
            existing = await self.find_by_license_and_fingerprint(license_id, fingerprint)
            await asyncio.sleep(0)
            if existing is None:
                return None
            del self.rows[existing.id]
            self.license_repository.adjust_counter(license_id, -1)
            return existing

    async def reconcile(self, license_id):
        async with self._locks[license_id]:
            license = await self.license_repository.find_by_id(license_id)
            actual = await self.count_by_license(license_id)
            previous = license.current_activations
            if previous != actual:
                self.license_repository.set_counter(license_id, actual)
            return previous, actual


class InMemoryAuditRepository(AuditRepository):
    """Append-only list of audit entries."""

    def __init__(self):
        self.entries: List[AuditEntry] = []

    async def append(self, license_id, action: AuditAction, fingerprint=None, details=None):
        entry = AuditEntry(
            id=uuid.uuid4(),
            license_id=license_id,
            action=action,
            machine_fingerprint=str(fingerprint) if fingerprint else None,
            timestamp=utc_now(),
            details=details or {},
        )
        self.entries.append(entry)
        return entry

    async def find_by_license(self, license_id, limit=100):
        matching = [entry for entry in self.entries if entry.license_id == license_id]
        return list(reversed(matching))[:limit]

    def actions(self) -> List[AuditAction]:
        return [entry.action for entry in self.entries]


class InMemoryProductRepository(ProductRepository):
    """Product repository backed by a dict."""

    def __init__(self):
        self.products: Dict[uuid.UUID, Product] = {}

    def add(self, product: Product) -> Product:
        self.products[product.id] = product
        return product

    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        return self.products.get(product_id)

    async def find_all(self) -> List[Product]:
        return sorted(self.products.values(), key=lambda product: product.name)


class InMemoryCustomerRepository(CustomerRepository):
    """Customer repository backed by a dict."""

    def __init__(self):
        self.customers: Dict[uuid.UUID, Customer] = {}

    def add(self, customer: Customer) -> Customer:
        self.customers[customer.id] = customer
        return customer

    async def find_by_id(self, customer_id: uuid.UUID) -> Optional[Customer]:
        return self.customers.get(customer_id)

    async def find_by_email(self, email: str) -> Optional[Customer]:
        for customer in self.customers.values():
            if str(customer.email).lower() == email.strip().lower():
                return customer
        return None


class BrokenLicenseRepository(InMemoryLicenseRepository):
    """License repository whose lookups fail like a lost connection."""

    async def find_by_key(self, license_key: str) -> Optional[License]:
        raise ConnectionError("database unavailable")


@pytest.fixture
def license_repository():
    """Fixture for an in-memory LicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def broken_license_repository():
    """Fixture for a LicenseRepository whose lookups fail."""
    return BrokenLicenseRepository()


@pytest.fixture
def product_repository():
    """Fixture for an in-memory ProductRepository."""
    return InMemoryProductRepository()


@pytest.fixture
def customer_repository():
    """Fixture for an in-memory CustomerRepository."""
    return InMemoryCustomerRepository()


@pytest.fixture
def activation_repository(license_repository):
    """Fixture for an in-memory ActivationRepository sharing the license store."""
    return InMemoryActivationRepository(license_repository)


@pytest.fixture
def audit_repository():
    """Fixture for an in-memory AuditRepository."""
    return InMemoryAuditRepository()


@pytest.fixture
def signer():
    """Fixture for the attestation signer."""
    return JWTAttestationSigner(secret=TEST_SIGNING_KEY, ttl_seconds=3600, algorithm="HS256")


@pytest.fixture
def make_license(license_repository):
    """Factory storing a License entity in the in-memory repository."""

    def _make(max_activations=2, expires_in=timedelta(days=30), **kwargs):
        expires_at = timezone.now() + expires_in if expires_in is not None else None
        license = License.create(
            product_id=kwargs.pop("product_id", uuid.uuid4()),
            customer_id=kwargs.pop("customer_id", uuid.uuid4()),
            max_activations=max_activations,
            expires_at=expires_at,
            features=kwargs.pop("features", ["export", "sync"]),
            **kwargs,
        )
        license_repository.licenses[license.id] = license
        return license

    return _make


@pytest.fixture
def validate_handler(license_repository, activation_repository, audit_repository, signer):
    """Fixture for ValidateLicenseHandler wired to in-memory repositories."""
    return ValidateLicenseHandler(
        license_repository=license_repository,
        activation_repository=activation_repository,
        audit_repository=audit_repository,
        signer=signer,
        timestamp_tolerance=300,
        audit_unknown_keys=False,
    )


@pytest.fixture
def deactivate_handler(license_repository, activation_repository, audit_repository):
    """Fixture for DeactivateMachineHandler wired to in-memory repositories."""
    return DeactivateMachineHandler(
        license_repository=license_repository,
        activation_repository=activation_repository,
        audit_repository=audit_repository,
    )


@pytest.fixture
def django_license_repository():
    """Fixture for DjangoLicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def django_activation_repository():
    """Fixture for DjangoActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def django_audit_repository():
    """Fixture for DjangoAuditRepository."""
    return DjangoAuditRepository()


@pytest.fixture
def db_product(db):
    """Fixture for a Product saved in database."""
    from products.infrastructure.models import Product

    return Product.objects.create(
        name="Studio Pro",
        version="5.1",
        features=["export", "render"],
        default_max_activations=3,
        default_validity_days=365,
    )


@pytest.fixture
def db_customer(db):
    """Fixture for a Customer saved in database."""
    from customers.infrastructure.models import Customer

    unique_id = uuid.uuid4().hex[:8]
    return Customer.objects.create(name="Ada Lovelace", email=f"ada-{unique_id}@example.com")


@pytest.fixture
def make_db_license(db, db_product, db_customer):
    """Factory for License rows saved in database."""
    from licenses.infrastructure.models import License as LicenseModel

    def _make(max_activations=2, expires_in=timedelta(days=30), **kwargs):
        return LicenseModel.objects.create(
            product=db_product,
            customer=db_customer,
            max_activations=max_activations,
            expires_at=timezone.now() + expires_in if expires_in is not None else None,
            features=kwargs.pop("features", ["export"]),
            **kwargs,
        )

    return _make


@pytest.fixture
def db_license(make_db_license):
    """Fixture for a License row with two activation slots."""
    return make_db_license()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_headers(settings):
    """Headers authorizing requests to the admin API."""
    return {"HTTP_X_ADMIN_KEY": settings.LICENSE_ADMIN_API_KEY}


@pytest.fixture(autouse=True)
def _clear_cache():
    """Reset rate limit counters between tests."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()
