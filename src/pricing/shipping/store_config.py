"""Store shipping configuration: what a seller has set up for delivery.

Sellers choose which governorates and cities they serve, whether they offer
same-day delivery (and until what hour), and what they charge per zone. The
zone resolver treats this configuration as authoritative whenever it exists.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Dict, Identifier, Integer, List, String

from pricing.domain import pricing
from pricing.shipping.configuration import normalize
from pricing.shipping.zones import ShippingZone

logger = structlog.get_logger(__name__)

DEFAULT_STORE_TIMEZONE = "Africa/Cairo"


@pricing.value_object
class StoreShippingConfiguration:
    """A store's delivery coverage and per-zone fees.

    ``zone_fees`` maps zone names (``"SameDay"``, ``"Local"``, ...) to fee
    amounts. Zones without a fee ship for free until the store configures
    one.
    """

    store_id: Identifier(required=True)
    offers_same_day_delivery: Boolean(default=False)
    offers_standard_delivery: Boolean(default=True)
    same_day_cutoff_hour: Integer(min_value=0, max_value=23)
    supported_governorates: List(String(max_length=100))
    supported_cities: List(String(max_length=100))
    excluded_cities: List(String(max_length=100))
    zone_fees: Dict()
    timezone: String(max_length=64, default=DEFAULT_STORE_TIMEZONE)
    is_active: Boolean(default=True)

    @invariant.post
    def must_offer_a_delivery_option(self):
        if not self.offers_same_day_delivery and not self.offers_standard_delivery:
            raise ValidationError(
                {"offers_standard_delivery": ["At least one delivery option (same-day or standard) must be offered"]}
            )

    @invariant.post
    def same_day_delivery_requires_cutoff_and_coverage(self):
        if not self.offers_same_day_delivery:
            return
        if self.same_day_cutoff_hour is None:
            raise ValidationError({"same_day_cutoff_hour": ["Same-day delivery requires a cutoff hour"]})
        if not self.supported_governorates and not self.supported_cities:
            raise ValidationError(
                {"supported_cities": ["Same-day delivery requires at least one supported governorate or city"]}
            )

    @invariant.post
    def cities_cannot_be_supported_and_excluded(self):
        conflicts = {normalize(c) for c in self.supported_cities} & {normalize(c) for c in self.excluded_cities}
        if conflicts:
            raise ValidationError(
                {"excluded_cities": [f"Cities cannot be both supported and excluded: {', '.join(sorted(conflicts))}"]}
            )

    @invariant.post
    def zone_fees_must_be_valid(self):
        if not isinstance(self.zone_fees, dict):
            raise ValidationError({"zone_fees": ["Zone fees must map zone names to amounts"]})
        for zone_name, amount in (self.zone_fees or {}).items():
            try:
                zone = ShippingZone.parse(zone_name)
            except ValueError:
                raise ValidationError({"zone_fees": [f"Unknown shipping zone: {zone_name}"]}) from None
            if not zone.is_supported:
                raise ValidationError({"zone_fees": ["Cannot charge for an unsupported zone"]})
            try:
                fee = Decimal(str(amount))
            except InvalidOperation:
                raise ValidationError({"zone_fees": [f"Invalid fee for {zone_name}: {amount!r}"]}) from None
            if not fee.is_finite() or fee < 0:
                raise ValidationError({"zone_fees": [f"Fee for {zone_name} must be a non-negative amount"]})

    @invariant.post
    def timezone_must_exist(self):
        if not self.timezone:
            raise ValidationError({"timezone": ["Timezone is required"]})
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError({"timezone": [f"Unknown timezone: {self.timezone}"]}) from None

    @invariant.post
    def warn_when_same_day_is_cheaper_than_standard(self):
        same_day_fee = self.fee_for(ShippingZone.SAME_DAY)
        standard_fee = self.fee_for(ShippingZone.LOCAL)
        if self.offers_same_day_delivery and same_day_fee < standard_fee:
            logger.warning(
                "Same-day delivery fee is below the standard delivery fee",
                store_id=self.store_id,
                same_day_fee=str(same_day_fee),
                standard_fee=str(standard_fee),
            )

    def fee_for(self, zone: ShippingZone) -> Decimal:
        """Configured fee for ``zone``, or zero when the store has not set one."""
        for zone_name, amount in (self.zone_fees or {}).items():
            try:
                if ShippingZone.parse(zone_name) is zone:
                    return Decimal(str(amount))
            except (ValueError, InvalidOperation):
                continue
        return Decimal("0")

    def excludes_city(self, city) -> bool:
        return normalize(city) in {normalize(c) for c in self.excluded_cities}

    def serves_city(self, city) -> bool:
        return normalize(city) in {normalize(c) for c in self.supported_cities}

    def covers(self, city, state) -> bool:
        """Whether the destination falls inside the store's coverage area."""
        if self.excludes_city(city):
            return False
        if not self.supported_governorates:
            return True
        return normalize(state) in {normalize(g) for g in self.supported_governorates} or self.serves_city(city)

    def same_day_cutoff_passed(self, now: datetime) -> bool:
        if self.same_day_cutoff_hour is None:
            return False
        local_now = now.astimezone(ZoneInfo(self.timezone))
        return local_now.hour > self.same_day_cutoff_hour

    def can_deliver_same_day(self, city, state, now: datetime) -> bool:
        return (
            self.offers_same_day_delivery
            and self.covers(city, state)
            and self.serves_city(city)
            and not self.same_day_cutoff_passed(now)
        )
