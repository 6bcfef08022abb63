"""Tests for the in-memory adapters and their registries."""

from datetime import UTC, datetime
from decimal import Decimal

from pricing.catalog import get_catalog, reset_catalog, set_catalog
from pricing.catalog.fake_adapter import FakeCatalog
from pricing.discount import get_discount_resolver, reset_discount_resolver
from pricing.discount.discount import DiscountCode, DiscountType
from pricing.discount.fake_adapter import FakeDiscountResolver
from pricing.shipping import get_store_shipping, reset_store_shipping
from pricing.shipping.fake_adapter import FakeStoreShippingDirectory
from pricing.shipping.store_config import StoreShippingConfiguration


class TestFakeCatalog:
    def test_known_product(self):
        catalog = FakeCatalog()
        catalog.add_product("P1", "100.50", "S1")
        product = catalog.get_product("P1")
        assert product.price == Decimal("100.50")
        assert product.store_id == "S1"
        assert catalog.calls == ["P1"]

    def test_unknown_product(self):
        assert FakeCatalog().get_product("missing") is None


class TestFakeDiscountResolver:
    def test_codes_match_case_insensitively(self):
        resolver = FakeDiscountResolver()
        resolver.add_discount(
            DiscountCode(
                code="SAVE10",
                discount_type=DiscountType.PERCENTAGE.value,
                value=Decimal("0.10"),
                valid_from=datetime(2025, 1, 1, tzinfo=UTC),
                valid_to=datetime(2025, 12, 31, tzinfo=UTC),
            )
        )
        validation = resolver.validate(" save10 ", Decimal("200"), ["S1"])
        assert validation.is_valid
        assert validation.discount.code == "SAVE10"

    def test_unknown_code(self):
        validation = FakeDiscountResolver().validate("NOPE", Decimal("200"), ["S1"])
        assert not validation.is_valid
        assert validation.error_message == "Discount code not found"

    def test_expired_against_domain_clock(self, clock):
        resolver = FakeDiscountResolver()
        resolver.add_discount(
            DiscountCode(
                code="OLD",
                discount_type=DiscountType.FIXED_AMOUNT.value,
                value=Decimal("5"),
                valid_from=datetime(2024, 1, 1, tzinfo=UTC),
                valid_to=datetime(2024, 12, 31, tzinfo=UTC),
            )
        )
        validation = resolver.validate("OLD", Decimal("200"), ["S1"])
        assert validation.error_message == "Discount code has expired"


class TestFakeStoreShippingDirectory:
    def test_configure_and_remove(self):
        directory = FakeStoreShippingDirectory()
        directory.configure(StoreShippingConfiguration(store_id="S1"))
        assert directory.get_configuration("S1").store_id == "S1"
        directory.remove("S1")
        assert directory.get_configuration("S1") is None
        assert directory.calls == ["S1", "S1"]


class TestRegistries:
    def test_catalog_defaults_to_fake(self):
        reset_catalog()
        assert isinstance(get_catalog(), FakeCatalog)
        assert get_catalog() is get_catalog()

    def test_catalog_override(self):
        replacement = FakeCatalog()
        set_catalog(replacement)
        assert get_catalog() is replacement
        reset_catalog()
        assert get_catalog() is not replacement

    def test_discount_resolver_defaults_to_fake(self):
        reset_discount_resolver()
        assert isinstance(get_discount_resolver(), FakeDiscountResolver)

    def test_store_shipping_defaults_to_fake(self):
        reset_store_shipping()
        assert isinstance(get_store_shipping(), FakeStoreShippingDirectory)
