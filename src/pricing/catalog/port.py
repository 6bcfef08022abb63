"""Product catalog port (abstract interface).

The pricing engine never owns product data. It asks the catalog for the
current unit price and the store that sells the product, nothing more.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CatalogProduct:
    """Pricing view of a catalog product."""

    product_id: str
    price: Decimal
    store_id: str


class ProductCatalogGateway(ABC):
    """Abstract product catalog interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> CatalogProduct | None:
        """Return the product, or None when the catalog does not know it."""
        ...
