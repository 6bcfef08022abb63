"""In-memory store shipping directory for development and testing."""

from pricing.shipping.port import StoreShippingDirectory
from pricing.shipping.store_config import StoreShippingConfiguration


class FakeStoreShippingDirectory(StoreShippingDirectory):
    """Holds store configurations in a dict keyed by store id."""

    def __init__(self) -> None:
        self.configurations: dict[str, StoreShippingConfiguration] = {}
        self.calls: list[str] = []

    def configure(self, configuration: StoreShippingConfiguration) -> None:
        """Register (or replace) a store's configuration."""
        self.configurations[str(configuration.store_id)] = configuration

    def remove(self, store_id: str) -> None:
        self.configurations.pop(str(store_id), None)

    def get_configuration(self, store_id: str) -> StoreShippingConfiguration | None:
        self.calls.append(str(store_id))
        return self.configurations.get(str(store_id))
