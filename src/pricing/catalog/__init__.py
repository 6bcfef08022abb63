"""Product catalog factory.

Provides get_catalog() / set_catalog() to swap implementations. The
in-memory FakeCatalog is the default until the hosting application wires
in its real catalog adapter.
"""

from pricing.catalog.fake_adapter import FakeCatalog
from pricing.catalog.port import ProductCatalogGateway

_current_catalog: ProductCatalogGateway | None = None


def get_catalog() -> ProductCatalogGateway:
    """Return the current product catalog. Defaults to FakeCatalog."""
    global _current_catalog
    if _current_catalog is None:
        _current_catalog = FakeCatalog()
    return _current_catalog


def set_catalog(catalog: ProductCatalogGateway) -> None:
    """Override the active product catalog (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to default catalog."""
    global _current_catalog
    _current_catalog = None
