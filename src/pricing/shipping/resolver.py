"""Shipping zone resolution.

The resolver answers one question in several shapes: how fast (and at what
price) can an order reach this address? Geography alone decides the zone
unless the store has its own shipping configuration, in which case the
store's coverage and same-day setup take precedence.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import structlog

from pricing.domain import pricing
from pricing.shipping import get_store_shipping, get_zone_configuration
from pricing.shipping.address import ShippingAddress
from pricing.shipping.configuration import ZoneConfiguration, normalize
from pricing.shipping.port import StoreShippingDirectory
from pricing.shipping.store_config import StoreShippingConfiguration
from pricing.shipping.zones import ZONE_DELIVERY_HOURS, ZONE_MULTIPLIERS, ZONE_ORDER, ShippingZone

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StoreShippingQuote:
    """Zone and fee for shipping one store's items to an address."""

    store_id: str
    zone: ShippingZone
    fee: Decimal

    @property
    def is_deliverable(self) -> bool:
        return self.zone.is_supported


class ShippingZoneResolver:
    """Resolve destinations to shipping zones, multipliers and fees.

    Both collaborators default to the process-wide registries so callers
    normally construct it with no arguments.
    """

    def __init__(
        self,
        configuration: ZoneConfiguration | None = None,
        directory: StoreShippingDirectory | None = None,
    ) -> None:
        self.configuration = configuration or get_zone_configuration()
        self.directory = directory or get_store_shipping()

    # ------------------------------------------------------------------
    # Zone determination
    # ------------------------------------------------------------------

    def determine_zone(self, city, state=None, country=None, postal_code=None, store_id=None) -> ShippingZone:
        """Return the zone for a destination. Never raises."""
        try:
            store_config = self._active_store_configuration(store_id)
            if store_config is not None:
                return self._store_zone(store_config, city, state, country, postal_code)
            return self._heuristic_zone(city, state, country, postal_code)
        except Exception:
            logger.exception(
                "Zone determination failed, treating destination as unsupported",
                city=city,
                state=state,
                country=country,
                store_id=store_id,
            )
            return ShippingZone.NOT_SUPPORTED

    def zone_for_address(self, address: ShippingAddress, store_id=None) -> ShippingZone:
        return self.determine_zone(
            address.city,
            address.state,
            address.country,
            postal_code=address.postal_code,
            store_id=store_id,
        )

    def _heuristic_zone(self, city, state, country, postal_code) -> ShippingZone:
        config = self.configuration
        country_code = config.canonical_country(country)

        if country_code not in config.supported_countries:
            return ShippingZone.NOT_SUPPORTED

        if config.is_same_day_city(city, country_code):
            return ShippingZone.SAME_DAY

        if config.is_express_city(city, country_code):
            return ShippingZone.EXPRESS

        postal_key = normalize(postal_code)
        if postal_key and config.supports_postal_codes(country_code) and postal_key in config.postal_code_zones:
            return config.postal_code_zones[postal_key]

        city_key = normalize(city)
        if city_key in config.city_zones:
            return config.city_zones[city_key]

        state_key = normalize(state)
        if state_key in config.state_zones:
            return config.state_zones[state_key]

        if country_code in config.country_zones:
            return config.country_zones[country_code]

        return config.default_zone_for(country_code)

    def _store_zone(
        self, store_config: StoreShippingConfiguration, city, state, country, postal_code
    ) -> ShippingZone:
        if not self.configuration.is_country_supported(country):
            return ShippingZone.NOT_SUPPORTED

        if not store_config.covers(city, state):
            return ShippingZone.NOT_SUPPORTED

        same_day = store_config.can_deliver_same_day(city, state, self._now())
        if same_day:
            return ShippingZone.SAME_DAY

        if not store_config.offers_standard_delivery:
            return ShippingZone.NOT_SUPPORTED

        zone = self._heuristic_zone(city, state, country, postal_code)
        if zone is ShippingZone.SAME_DAY:
            return ShippingZone.EXPRESS
        return zone

    def _active_store_configuration(self, store_id) -> StoreShippingConfiguration | None:
        if store_id is None:
            return None
        store_config = self.directory.get_configuration(str(store_id))
        if store_config is None or not store_config.is_active:
            return None
        return store_config

    def _now(self) -> datetime:
        return pricing.clock.now()

    # ------------------------------------------------------------------
    # Speed tables
    # ------------------------------------------------------------------

    @staticmethod
    def get_zone_multiplier(zone: ShippingZone) -> Decimal:
        return ZONE_MULTIPLIERS.get(ShippingZone.parse(zone), Decimal("0"))

    @staticmethod
    def get_estimated_delivery_hours(zone: ShippingZone) -> int:
        return ZONE_DELIVERY_HOURS.get(ShippingZone.parse(zone), 0)

    # ------------------------------------------------------------------
    # Store-level answers
    # ------------------------------------------------------------------

    def get_delivery_fee(self, store_id, address: ShippingAddress) -> StoreShippingQuote:
        """Quote shipping for one store. Unsupported destinations quote a zero fee."""
        zone = self.zone_for_address(address, store_id=store_id)
        fee = Decimal("0")
        if zone.is_supported:
            store_config = self._active_store_configuration(store_id)
            if store_config is not None:
                fee = store_config.fee_for(zone)

        logger.debug("Delivery fee resolved", store_id=store_id, zone=zone.value, fee=str(fee))
        return StoreShippingQuote(store_id=str(store_id), zone=zone, fee=fee)

    def available_delivery_options(self, store_id, address: ShippingAddress) -> list[ShippingZone]:
        """Delivery tiers the customer can pick from, fastest first."""
        zone = self.zone_for_address(address, store_id=store_id)
        if not zone.is_supported:
            return []

        options = {zone}
        store_config = self._active_store_configuration(store_id)
        if store_config is None or store_config.offers_standard_delivery:
            options.add(ShippingZone.LOCAL)
        return [option for option in ZONE_ORDER if option in options]

    def is_eligible_for_same_day(self, address: ShippingAddress, store_id=None) -> bool:
        return self.zone_for_address(address, store_id=store_id) is ShippingZone.SAME_DAY

    def is_eligible_for_express(self, address: ShippingAddress, store_id=None) -> bool:
        return self.zone_for_address(address, store_id=store_id) in (ShippingZone.SAME_DAY, ShippingZone.EXPRESS)
