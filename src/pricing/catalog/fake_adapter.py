"""In-memory product catalog for development and testing."""

from decimal import Decimal

from pricing.catalog.port import CatalogProduct, ProductCatalogGateway


class FakeCatalog(ProductCatalogGateway):
    """Catalog backed by a dict. Products are added with ``add_product``."""

    def __init__(self) -> None:
        self.products: dict[str, CatalogProduct] = {}
        self.calls: list[str] = []

    def add_product(self, product_id: str, price, store_id: str) -> CatalogProduct:
        product = CatalogProduct(
            product_id=str(product_id),
            price=Decimal(str(price)),
            store_id=str(store_id),
        )
        self.products[product.product_id] = product
        return product

    def get_product(self, product_id: str) -> CatalogProduct | None:
        self.calls.append(str(product_id))
        return self.products.get(str(product_id))
