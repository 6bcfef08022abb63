"""Result types returned by the order price calculator."""

from dataclasses import dataclass, field
from decimal import Decimal

from pricing.shipping.resolver import StoreShippingQuote


@dataclass(frozen=True)
class AppliedDiscount:
    """A discount that reduced the order total, in application order."""

    code: str
    discount_type: str
    amount: Decimal


@dataclass(frozen=True)
class SkippedDiscount:
    """A submitted code that was not applied, with the reason why."""

    code: str
    reason: str


@dataclass(frozen=True)
class DiscountApplication:
    total_discount: Decimal
    applied: tuple[AppliedDiscount, ...] = ()
    skipped: tuple[SkippedDiscount, ...] = ()

    @property
    def applied_codes(self) -> list[str]:
        return [discount.code for discount in self.applied]


@dataclass(frozen=True)
class OrderPricingResult:
    """Everything checkout needs to show and charge for an order."""

    subtotal: Decimal
    shipping_cost: Decimal
    discount_total: Decimal
    grand_total: Decimal
    store_quotes: tuple[StoreShippingQuote, ...] = ()
    applied_discounts: tuple[AppliedDiscount, ...] = ()
    skipped_discounts: tuple[SkippedDiscount, ...] = ()
    order_id: str | None = field(default=None)

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "subtotal": str(self.subtotal),
            "shipping_cost": str(self.shipping_cost),
            "discount_total": str(self.discount_total),
            "grand_total": str(self.grand_total),
            "store_quotes": [
                {"store_id": q.store_id, "zone": q.zone.value, "fee": str(q.fee)} for q in self.store_quotes
            ],
            "applied_discounts": [
                {"code": d.code, "type": d.discount_type, "amount": str(d.amount)} for d in self.applied_discounts
            ],
            "skipped_discounts": [{"code": d.code, "reason": d.reason} for d in self.skipped_discounts],
        }
