"""Shipping zone factories.

Two pieces of process-wide wiring live here:

- the zone configuration snapshot, built lazily from the domain config and
  replaced only by swapping the reference (``set_zone_configuration``)
- the store shipping directory, defaulting to ``FakeStoreShippingDirectory``
"""

from pricing.shipping.configuration import ZoneConfiguration, load_zone_configuration
from pricing.shipping.fake_adapter import FakeStoreShippingDirectory
from pricing.shipping.port import StoreShippingDirectory

_current_configuration: ZoneConfiguration | None = None
_current_directory: StoreShippingDirectory | None = None


def get_zone_configuration() -> ZoneConfiguration:
    """Return the active zone configuration, loading it on first use."""
    global _current_configuration
    if _current_configuration is None:
        _current_configuration = load_zone_configuration()
    return _current_configuration


def set_zone_configuration(configuration: ZoneConfiguration) -> None:
    """Atomically replace the active zone configuration."""
    global _current_configuration
    _current_configuration = configuration


def reset_zone_configuration() -> None:
    """Drop the active snapshot so the next access reloads it."""
    global _current_configuration
    _current_configuration = None


def get_store_shipping() -> StoreShippingDirectory:
    """Return the current store shipping directory. Defaults to the in-memory one."""
    global _current_directory
    if _current_directory is None:
        _current_directory = FakeStoreShippingDirectory()
    return _current_directory


def set_store_shipping(directory: StoreShippingDirectory) -> None:
    """Override the active store shipping directory (useful for tests)."""
    global _current_directory
    _current_directory = directory


def reset_store_shipping() -> None:
    """Reset to the default directory."""
    global _current_directory
    _current_directory = None
