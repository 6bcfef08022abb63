"""Tests for the StoreShippingConfiguration value object."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from pricing.shipping.store_config import StoreShippingConfiguration
from pricing.shipping.zones import ShippingZone
from protean.exceptions import ValidationError


def build_config(**overrides):
    values = {
        "store_id": "store-1",
        "offers_same_day_delivery": True,
        "same_day_cutoff_hour": 14,
        "supported_governorates": ["Cairo", "Giza"],
        "supported_cities": ["Cairo"],
        "excluded_cities": ["Helwan"],
        "zone_fees": {"SameDay": "50", "Express": "30", "Local": "20"},
    }
    values.update(overrides)
    return StoreShippingConfiguration(**values)


class TestStoreShippingConfigurationDefaults:
    def test_standard_only_store(self):
        config = StoreShippingConfiguration(store_id="store-1")
        assert config.offers_standard_delivery is True
        assert config.offers_same_day_delivery is False
        assert config.is_active is True
        assert config.timezone == "Africa/Cairo"
        assert config.supported_cities == []
        assert config.zone_fees == {}

    def test_store_id_required(self):
        with pytest.raises(ValidationError):
            StoreShippingConfiguration()


class TestStoreShippingConfigurationRules:
    def test_must_offer_some_delivery(self):
        with pytest.raises(ValidationError) as exc:
            StoreShippingConfiguration(store_id="store-1", offers_standard_delivery=False)
        assert "offers_standard_delivery" in exc.value.messages

    def test_same_day_requires_cutoff(self):
        with pytest.raises(ValidationError) as exc:
            build_config(same_day_cutoff_hour=None)
        assert "same_day_cutoff_hour" in exc.value.messages

    def test_same_day_requires_coverage(self):
        with pytest.raises(ValidationError) as exc:
            build_config(supported_governorates=[], supported_cities=[])
        assert "supported_cities" in exc.value.messages

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_cutoff_hour_range(self, hour):
        with pytest.raises(ValidationError):
            build_config(same_day_cutoff_hour=hour)

    def test_city_cannot_be_supported_and_excluded(self):
        with pytest.raises(ValidationError) as exc:
            build_config(supported_cities=["Cairo"], excluded_cities=[" cairo "])
        assert "excluded_cities" in exc.value.messages

    def test_negative_fee_rejected(self):
        with pytest.raises(ValidationError):
            build_config(zone_fees={"Local": "-5"})

    def test_unknown_zone_fee_rejected(self):
        with pytest.raises(ValidationError):
            build_config(zone_fees={"Teleport": "5"})

    def test_fee_for_unsupported_zone_rejected(self):
        with pytest.raises(ValidationError):
            build_config(zone_fees={"NotSupported": "5"})

    def test_non_numeric_fee_rejected(self):
        with pytest.raises(ValidationError):
            build_config(zone_fees={"Local": "cheap"})

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError) as exc:
            build_config(timezone="Mars/Olympus_Mons")
        assert "timezone" in exc.value.messages

    def test_cheaper_same_day_fee_is_allowed(self):
        config = build_config(zone_fees={"SameDay": "10", "Local": "20"})
        assert config.fee_for(ShippingZone.SAME_DAY) == Decimal("10")


class TestStoreShippingConfigurationQueries:
    def test_fee_for_configured_zone(self):
        config = build_config()
        assert config.fee_for(ShippingZone.LOCAL) == Decimal("20")
        assert config.fee_for(ShippingZone.SAME_DAY) == Decimal("50")

    def test_fee_for_unconfigured_zone_is_zero(self):
        assert build_config().fee_for(ShippingZone.REMOTE) == Decimal("0")

    def test_fee_keys_accept_zone_names(self):
        config = build_config(zone_fees={"same_day": 45})
        assert config.fee_for(ShippingZone.SAME_DAY) == Decimal("45")

    def test_coverage(self):
        config = build_config()
        assert config.covers("Cairo", "Cairo")
        assert config.covers("Dokki", "giza")
        assert not config.covers("Helwan", "Cairo")
        assert not config.covers("Tanta", "Gharbia")

    def test_coverage_without_governorates_is_nationwide(self):
        config = StoreShippingConfiguration(store_id="store-1", excluded_cities=["Siwa"])
        assert config.covers("Tanta", "Gharbia")
        assert not config.covers("Siwa", "Matrouh")

    def test_cutoff_is_checked_in_store_timezone(self):
        config = build_config(same_day_cutoff_hour=14, timezone="UTC")
        assert not config.same_day_cutoff_passed(datetime(2025, 6, 11, 14, 30, tzinfo=UTC))
        assert config.same_day_cutoff_passed(datetime(2025, 6, 11, 15, 0, tzinfo=UTC))

    def test_same_day_needs_supported_city(self):
        now = datetime(2025, 6, 11, 7, 0, tzinfo=UTC)
        config = build_config()
        assert config.can_deliver_same_day("Cairo", "Cairo", now)
        assert not config.can_deliver_same_day("Dokki", "Giza", now)
