"""Zone configuration: the immutable geographic lookup tables.

A ``ZoneConfiguration`` is built once at process start from a plain mapping
(the built-in Egyptian defaults, overlaid with the ``[custom.SHIPPING_ZONES]``
section of the domain config) and then shared read-only by every
calculation. Reloading means building a new snapshot and swapping the
reference, never editing tables in place.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog
from protean.exceptions import ConfigurationError

from pricing.shipping.zones import ShippingZone

logger = structlog.get_logger(__name__)

_EGYPT_EXPRESS_CITIES = [
    "CAIRO",
    "ALEXANDRIA",
    "GIZA",
    "SHUBRA EL KHEIMA",
    "PORT SAID",
    "SUEZ",
    "LUXOR",
    "ASWAN",
    "ISMAILIA",
    "FAYYUM",
    "ZAGAZIG",
    "ASUIT",
    "TANTA",
    "MANSOURA",
    "DAMANHUR",
    "MINYA",
    "BENI SUEF",
    "QENA",
    "SOHAAG",
    "HURGHADA",
    "SHARM EL SHEIKH",
]

DEFAULT_ZONE_SETTINGS = {
    "supported_countries": ["EG"],
    "postal_code_countries": [],
    "country_aliases": {"EGYPT": "EG", "EGY": "EG", "UK": "GB"},
    "same_day_cities": {"EG": ["CAIRO", "ALEXANDRIA"]},
    "express_cities": {"EG": _EGYPT_EXPRESS_CITIES},
    "postal_code_zones": {},
    "city_zones": {
        "CAIRO": "SameDay",
        "ALEXANDRIA": "SameDay",
        **{city: "Express" for city in _EGYPT_EXPRESS_CITIES if city not in ("CAIRO", "ALEXANDRIA")},
    },
    "state_zones": {
        # Governorates with express coverage
        "CAIRO": "Express",
        "ALEXANDRIA": "Express",
        "GIZA": "Express",
        "QALYUBIA": "Express",
        "PORT SAID": "Express",
        "SUEZ": "Express",
        "ISMAILIA": "Express",
        "LUXOR": "Express",
        "ASWAN": "Express",
        "HURGHADA": "Express",
        "SHARM EL SHEIKH": "Express",
        # Regional governorates
        "DAKAHLIA": "Regional",
        "SHARQIA": "Regional",
        "KAFR EL SHEIKH": "Regional",
        "GHARBIA": "Regional",
        "MONUFIA": "Regional",
        "BEHEIRA": "Regional",
        "FAYYUM": "Regional",
        "BENI SUEF": "Regional",
        "MINYA": "Regional",
        "ASUIT": "Regional",
        "SOHAAG": "Regional",
        "QENA": "Regional",
        "RED SEA": "Regional",
        "NORTH SINAI": "Regional",
        "SOUTH SINAI": "Regional",
        "NEW VALLEY": "Remote",
        "MATROUH": "Remote",
    },
    "country_zones": {"EG": "Local"},
    # Only EG ships by default; the other entries take effect once a
    # deployment adds the country to supported_countries.
    "default_zones": {
        "EG": "Local",
        "US": "National",
        "CA": "National",
        "GB": "International",
        "DE": "International",
        "FR": "International",
        "IT": "International",
        "ES": "International",
    },
}

TABLE_KEYS = frozenset(DEFAULT_ZONE_SETTINGS)


def normalize(value) -> str:
    """Canonical lookup key: stripped, upper-cased, empty for ``None``."""
    if value is None:
        return ""
    return str(value).strip().upper()


def _frozen_zone_table(name: str, table: Mapping) -> Mapping[str, ShippingZone]:
    zones = {}
    for key, value in table.items():
        try:
            zone = ShippingZone.parse(value)
        except ValueError as exc:
            raise ConfigurationError(f"{name}: {exc}") from exc
        if not zone.is_supported:
            raise ConfigurationError(f"{name}: {key} cannot be mapped to {zone.value}")
        zones[normalize(key)] = zone
    return MappingProxyType(zones)


def _frozen_city_sets(table: Mapping) -> Mapping[str, frozenset[str]]:
    return MappingProxyType(
        {normalize(country): frozenset(normalize(city) for city in cities) for country, cities in table.items()}
    )


@dataclass(frozen=True)
class ZoneConfiguration:
    """Read-only geographic lookup tables used by the zone resolver."""

    supported_countries: frozenset[str] = frozenset()
    postal_code_countries: frozenset[str] = frozenset()
    country_aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    same_day_cities: Mapping[str, frozenset[str]] = field(default_factory=lambda: MappingProxyType({}))
    express_cities: Mapping[str, frozenset[str]] = field(default_factory=lambda: MappingProxyType({}))
    postal_code_zones: Mapping[str, ShippingZone] = field(default_factory=lambda: MappingProxyType({}))
    city_zones: Mapping[str, ShippingZone] = field(default_factory=lambda: MappingProxyType({}))
    state_zones: Mapping[str, ShippingZone] = field(default_factory=lambda: MappingProxyType({}))
    country_zones: Mapping[str, ShippingZone] = field(default_factory=lambda: MappingProxyType({}))
    default_zones: Mapping[str, ShippingZone] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, settings: Mapping) -> "ZoneConfiguration":
        """Build a snapshot from plain data, e.g. a parsed TOML section."""
        unknown = set(settings) - TABLE_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown shipping zone settings: {', '.join(sorted(unknown))}")

        aliases = {normalize(k): normalize(v) for k, v in settings.get("country_aliases", {}).items()}

        return cls(
            supported_countries=frozenset(normalize(c) for c in settings.get("supported_countries", [])),
            postal_code_countries=frozenset(normalize(c) for c in settings.get("postal_code_countries", [])),
            country_aliases=MappingProxyType(aliases),
            same_day_cities=_frozen_city_sets(settings.get("same_day_cities", {})),
            express_cities=_frozen_city_sets(settings.get("express_cities", {})),
            postal_code_zones=_frozen_zone_table("postal_code_zones", settings.get("postal_code_zones", {})),
            city_zones=_frozen_zone_table("city_zones", settings.get("city_zones", {})),
            state_zones=_frozen_zone_table("state_zones", settings.get("state_zones", {})),
            country_zones=_frozen_zone_table("country_zones", settings.get("country_zones", {})),
            default_zones=_frozen_zone_table("default_zones", settings.get("default_zones", {})),
        )

    def canonical_country(self, country) -> str:
        key = normalize(country)
        return self.country_aliases.get(key, key)

    def is_country_supported(self, country) -> bool:
        return self.canonical_country(country) in self.supported_countries

    def supports_postal_codes(self, country) -> bool:
        return self.canonical_country(country) in self.postal_code_countries

    def is_same_day_city(self, city, country) -> bool:
        return normalize(city) in self.same_day_cities.get(self.canonical_country(country), frozenset())

    def is_express_city(self, city, country) -> bool:
        return normalize(city) in self.express_cities.get(self.canonical_country(country), frozenset())

    def default_zone_for(self, country) -> ShippingZone:
        return self.default_zones.get(self.canonical_country(country), ShippingZone.LOCAL)

    def to_dict(self) -> dict:
        """Plain-data view of the snapshot, the inverse of ``from_mapping``."""
        return {
            "supported_countries": sorted(self.supported_countries),
            "postal_code_countries": sorted(self.postal_code_countries),
            "country_aliases": dict(self.country_aliases),
            "same_day_cities": {k: sorted(v) for k, v in self.same_day_cities.items()},
            "express_cities": {k: sorted(v) for k, v in self.express_cities.items()},
            "postal_code_zones": {k: v.value for k, v in self.postal_code_zones.items()},
            "city_zones": {k: v.value for k, v in self.city_zones.items()},
            "state_zones": {k: v.value for k, v in self.state_zones.items()},
            "country_zones": {k: v.value for k, v in self.country_zones.items()},
            "default_zones": {k: v.value for k, v in self.default_zones.items()},
        }


def load_zone_configuration(overrides: Mapping | None = None) -> ZoneConfiguration:
    """Build the process-wide snapshot.

    Each table present (and non-empty) in ``overrides`` replaces the
    corresponding built-in table. When ``overrides`` is omitted, the
    ``SHIPPING_ZONES`` section of the pricing domain's custom config is used.
    """
    if overrides is None:
        from pricing.domain import pricing

        overrides = pricing.config.get("custom", {}).get("SHIPPING_ZONES") or {}

    settings = dict(DEFAULT_ZONE_SETTINGS)
    overridden = []
    for key, table in overrides.items():
        if table:
            settings[key] = table
            overridden.append(key)

    configuration = ZoneConfiguration.from_mapping(settings)

    logger.info(
        "Shipping zone configuration loaded",
        supported_countries=sorted(configuration.supported_countries),
        overridden_tables=overridden,
    )
    return configuration
