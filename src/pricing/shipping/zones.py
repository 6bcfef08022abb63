"""Shipping zones and their speed tables.

Zones are ordered by increasing delivery duration. ``NOT_SUPPORTED`` is the
terminal zone returned for destinations that cannot be served; it has no
place in the speed ordering.
"""

from decimal import Decimal
from enum import Enum


class ShippingZone(Enum):
    SAME_DAY = "SameDay"
    EXPRESS = "Express"
    LOCAL = "Local"
    REGIONAL = "Regional"
    NATIONAL = "National"
    REMOTE = "Remote"
    INTERNATIONAL = "International"
    NOT_SUPPORTED = "NotSupported"

    @classmethod
    def parse(cls, value) -> "ShippingZone":
        """Look a zone up by value or member name, ignoring case, spaces and underscores."""
        if isinstance(value, cls):
            return value

        key = str(value).replace("_", "").replace(" ", "").lower()
        for zone in cls:
            if key in (zone.value.lower(), zone.name.replace("_", "").lower()):
                return zone
        raise ValueError(f"Unknown shipping zone: {value!r}")

    @property
    def is_supported(self) -> bool:
        return self is not ShippingZone.NOT_SUPPORTED


# Fastest first
ZONE_ORDER = (
    ShippingZone.SAME_DAY,
    ShippingZone.EXPRESS,
    ShippingZone.LOCAL,
    ShippingZone.REGIONAL,
    ShippingZone.NATIONAL,
    ShippingZone.REMOTE,
    ShippingZone.INTERNATIONAL,
)

ZONE_MULTIPLIERS = {
    ShippingZone.SAME_DAY: Decimal("0.3"),
    ShippingZone.EXPRESS: Decimal("0.6"),
    ShippingZone.LOCAL: Decimal("1.0"),
    ShippingZone.REGIONAL: Decimal("1.5"),
    ShippingZone.NATIONAL: Decimal("2.0"),
    ShippingZone.REMOTE: Decimal("3.0"),
    ShippingZone.INTERNATIONAL: Decimal("4.0"),
    ShippingZone.NOT_SUPPORTED: Decimal("0"),
}

ZONE_DELIVERY_HOURS = {
    ShippingZone.SAME_DAY: 4,
    ShippingZone.EXPRESS: 8,
    ShippingZone.LOCAL: 24,
    ShippingZone.REGIONAL: 36,
    ShippingZone.NATIONAL: 48,
    ShippingZone.REMOTE: 72,
    ShippingZone.INTERNATIONAL: 168,
    ShippingZone.NOT_SUPPORTED: 0,
}
