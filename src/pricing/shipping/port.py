"""Store shipping directory port (abstract interface).

Stores maintain their shipping setup elsewhere (seller dashboard, admin
tooling). The pricing engine only ever reads it through this port, so the
backing store can be swapped without touching the zone resolver.
"""

from abc import ABC, abstractmethod

from pricing.shipping.store_config import StoreShippingConfiguration


class StoreShippingDirectory(ABC):
    """Abstract lookup of per-store shipping configuration."""

    @abstractmethod
    def get_configuration(self, store_id: str) -> StoreShippingConfiguration | None:
        """Return the store's shipping configuration, or None when it has none."""
        ...
