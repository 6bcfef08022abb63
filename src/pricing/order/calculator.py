"""Order price calculator.

Turns checkout line items, a destination and discount codes into the
amounts the customer will be charged:

    grand_total = subtotal - discounts + shipping

Each step is available on its own for callers that only need part of the
answer (cart previews, shipping estimates). ``price_order`` runs them all
and returns a result only when every step succeeded.

Blocking problems (unknown product, bad quantity, a store that cannot ship
to the address) raise. Discount codes never block an order: a code that
cannot be used is skipped and reported back in the result.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

import structlog
from protean.exceptions import ValidationError

from pricing.catalog import get_catalog
from pricing.catalog.port import CatalogProduct, ProductCatalogGateway
from pricing.discount import get_discount_resolver
from pricing.discount.port import DiscountResolver
from pricing.exceptions import ProductNotFoundError, ShippingUnavailableError
from pricing.order.lines import OrderLineRequest
from pricing.order.results import (
    AppliedDiscount,
    DiscountApplication,
    OrderPricingResult,
    SkippedDiscount,
)
from pricing.shipping.address import ShippingAddress
from pricing.shipping.resolver import ShippingZoneResolver, StoreShippingQuote
from pricing.utils.logging import order_context

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def _as_line(item) -> OrderLineRequest:
    if isinstance(item, OrderLineRequest):
        return item
    if not isinstance(item, Mapping):
        logger.warning("Unsupported order line rejected", item=repr(item))
        raise ValidationError({"items": [f"Unsupported line item: {item!r}"]})
    try:
        return OrderLineRequest(**item)
    except ValidationError as exc:
        logger.warning(
            "Invalid order line rejected",
            product_id=item.get("product_id"),
            quantity=item.get("quantity"),
            errors=exc.messages,
        )
        raise


def _as_address(address) -> ShippingAddress:
    if isinstance(address, ShippingAddress):
        return address
    if not isinstance(address, Mapping):
        logger.warning("Shipping address missing")
        raise ValidationError({"address": ["Shipping address is required"]})
    try:
        return ShippingAddress(**address)
    except ValidationError as exc:
        logger.warning("Invalid shipping address rejected", city=address.get("city"), errors=exc.messages)
        raise


class OrderPriceCalculator:
    def __init__(
        self,
        catalog: ProductCatalogGateway | None = None,
        discount_resolver: DiscountResolver | None = None,
        zone_resolver: ShippingZoneResolver | None = None,
    ) -> None:
        self.catalog = catalog or get_catalog()
        self.discount_resolver = discount_resolver or get_discount_resolver()
        self.zone_resolver = zone_resolver or ShippingZoneResolver()

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def _resolve(self, items: Iterable) -> list[tuple[OrderLineRequest, CatalogProduct]]:
        resolved = []
        for item in items:
            line = _as_line(item)
            product = self.catalog.get_product(line.product_id)
            if product is None:
                logger.warning("Product not found while pricing order", product_id=line.product_id)
                raise ProductNotFoundError(line.product_id)
            resolved.append((line, product))
        return resolved

    @staticmethod
    def _subtotal(resolved: list[tuple[OrderLineRequest, CatalogProduct]]) -> Decimal:
        return sum((product.price * line.quantity for line, product in resolved), ZERO)

    @staticmethod
    def _group(resolved: list[tuple[OrderLineRequest, CatalogProduct]]) -> dict[str, list[OrderLineRequest]]:
        groups: dict[str, list[OrderLineRequest]] = {}
        for line, product in resolved:
            groups.setdefault(product.store_id, []).append(line)
        return groups

    def calculate_subtotal(self, items: Iterable) -> Decimal:
        """Sum of unit price times quantity over every line."""
        return self._subtotal(self._resolve(items))

    def group_items_by_store(self, items: Iterable) -> dict[str, list[OrderLineRequest]]:
        """Lines grouped by the store that sells them, in submission order."""
        return self._group(self._resolve(items))

    # ------------------------------------------------------------------
    # Shipping
    # ------------------------------------------------------------------

    def quote_shipping(self, items_by_store: Mapping, address) -> list[StoreShippingQuote]:
        """One quote per store. Raises if any store cannot ship to the address."""
        address = _as_address(address)
        quotes = []
        for store_id in items_by_store:
            quote = self.zone_resolver.get_delivery_fee(store_id, address)
            if not quote.is_deliverable:
                logger.warning(
                    "Store cannot ship to destination",
                    store_id=store_id,
                    destination=address.describe(),
                )
                raise ShippingUnavailableError(store_id, address)
            quotes.append(quote)
        return quotes

    def calculate_shipping_cost(self, items_by_store: Mapping, address) -> Decimal:
        return sum((quote.fee for quote in self.quote_shipping(items_by_store, address)), ZERO)

    # ------------------------------------------------------------------
    # Discounts
    # ------------------------------------------------------------------

    def apply_discounts(self, codes: Iterable[str], subtotal: Decimal, store_ids: Iterable[str]) -> DiscountApplication:
        """Apply codes in order, never letting the total exceed ``subtotal``.

        Percentage discounts are computed on the full subtotal; every discount
        is then capped at whatever subtotal is left after the earlier ones.
        """
        store_ids = [str(store_id) for store_id in store_ids]
        applied: list[AppliedDiscount] = []
        skipped: list[SkippedDiscount] = []
        seen: set[str] = set()
        total = ZERO

        for raw_code in codes or ():
            code = str(raw_code).strip() if raw_code is not None else ""
            if not code:
                skipped.append(SkippedDiscount(code="", reason="Discount code is empty"))
                logger.info("Discount code skipped", code="", reason="Discount code is empty")
                continue

            key = code.upper()
            if key in seen:
                skipped.append(SkippedDiscount(code=code, reason="Discount code already applied"))
                logger.info("Duplicate discount code skipped", code=code)
                continue
            seen.add(key)

            try:
                validation = self.discount_resolver.validate(code, subtotal, store_ids)
            except Exception as exc:
                logger.exception("Discount validation failed", code=code)
                skipped.append(SkippedDiscount(code=code, reason=f"Validation error: {exc}"))
                continue

            if not validation.is_valid or validation.discount is None:
                reason = validation.error_message or "Discount code is not valid"
                skipped.append(SkippedDiscount(code=code, reason=reason))
                logger.warning("Discount code skipped", code=code, reason=reason)
                continue

            discount = validation.discount
            amount = min(discount.amount_for(subtotal), subtotal - total)
            if amount <= 0:
                logger.debug("Discount has nothing left to reduce", code=code)
                continue

            total += amount
            applied.append(AppliedDiscount(code=code, discount_type=discount.discount_type, amount=amount))
            logger.info("Discount applied", code=code, discount_type=discount.discount_type, amount=str(amount))

        return DiscountApplication(total_discount=total, applied=tuple(applied), skipped=tuple(skipped))

    # ------------------------------------------------------------------
    # Whole order
    # ------------------------------------------------------------------

    def price_order(self, items, address, discount_codes: Iterable[str] = (), order_id=None) -> OrderPricingResult:
        items = list(items or ())
        if not items:
            logger.warning("Order has no items", order_id=order_id)
            raise ValidationError({"items": ["Order must contain at least one item"]})

        with order_context(order_id):
            address = _as_address(address)
            resolved = self._resolve(items)
            subtotal = self._subtotal(resolved)
            items_by_store = self._group(resolved)

            quotes = self.quote_shipping(items_by_store, address)
            shipping_cost = sum((quote.fee for quote in quotes), ZERO)

            discounts = self.apply_discounts(discount_codes, subtotal, list(items_by_store))
            grand_total = subtotal - discounts.total_discount + shipping_cost

            logger.info(
                "Order priced",
                subtotal=str(subtotal),
                shipping_cost=str(shipping_cost),
                discount_total=str(discounts.total_discount),
                grand_total=str(grand_total),
                stores=len(items_by_store),
            )

            return OrderPricingResult(
                subtotal=subtotal,
                shipping_cost=shipping_cost,
                discount_total=discounts.total_discount,
                grand_total=grand_total,
                store_quotes=tuple(quotes),
                applied_discounts=discounts.applied,
                skipped_discounts=discounts.skipped,
                order_id=str(order_id) if order_id is not None else None,
            )
