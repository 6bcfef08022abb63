"""Calculation-blocking errors raised by the pricing engine.

Field-level problems (bad quantity, malformed address, empty order) are
reported with protean's ``ValidationError`` like everywhere else in the
codebase. The two errors below carry the identifiers callers need to tell
the customer what went wrong.
"""

from protean.exceptions import ObjectNotFoundError, ProteanException


class ProductNotFoundError(ObjectNotFoundError):
    """A line item references a product the catalog does not know."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ShippingUnavailableError(ProteanException):
    """A store in the order cannot ship to the destination address."""

    def __init__(self, store_id: str, address) -> None:
        destination = ", ".join(
            part for part in (address.city, address.state, address.country) if part
        )
        super().__init__(f"Store {store_id} does not ship to {destination}")
        self.store_id = store_id
        self.address = address
