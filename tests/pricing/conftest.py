from datetime import UTC, datetime

import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils import SystemClock

from pricing.catalog import reset_catalog, set_catalog
from pricing.catalog.fake_adapter import FakeCatalog
from pricing.discount import reset_discount_resolver, set_discount_resolver
from pricing.discount.fake_adapter import FakeDiscountResolver
from pricing.shipping import (
    reset_store_shipping,
    reset_zone_configuration,
    set_store_shipping,
)
from pricing.shipping.fake_adapter import FakeStoreShippingDirectory

# A Wednesday in June, 10:00 in Cairo: outside every seasonal and weekend factor
DEFAULT_NOW = datetime(2025, 6, 11, 7, 0, tzinfo=UTC)


class FixedClock:
    """Clock that always returns the same instant."""

    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


@pytest.fixture(scope="session")
def pricing_bed():
    from pricing.domain import pricing

    bed = DomainFixture(pricing)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(pricing_bed):
    with pricing_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def clock():
    """Pin the pricing domain's clock for the duration of a test."""
    from pricing.domain import pricing

    fixed = FixedClock(DEFAULT_NOW)
    pricing.clock = fixed
    yield fixed
    pricing.clock = SystemClock()


@pytest.fixture(autouse=True)
def _reset_adapters():
    """Every test starts from fresh adapters and the built-in zone tables."""
    reset_zone_configuration()
    reset_catalog()
    reset_discount_resolver()
    reset_store_shipping()
    yield
    reset_zone_configuration()
    reset_catalog()
    reset_discount_resolver()
    reset_store_shipping()


@pytest.fixture
def catalog():
    fake = FakeCatalog()
    set_catalog(fake)
    return fake


@pytest.fixture
def discounts():
    fake = FakeDiscountResolver()
    set_discount_resolver(fake)
    return fake


@pytest.fixture
def store_directory():
    fake = FakeStoreShippingDirectory()
    set_store_shipping(fake)
    return fake
