"""Discount codes and their eligibility rules."""

import decimal
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Decimal, Identifier, String

from pricing.domain import pricing


class DiscountType(Enum):
    PERCENTAGE = "Percentage"
    FIXED_AMOUNT = "FixedAmount"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@pricing.value_object
class DiscountCode:
    """A redeemable discount.

    Percentage values are fractions: ``0.10`` takes 10% off the subtotal.
    Fixed amounts are taken off as-is. ``applicable_store_id`` restricts the
    code to orders containing that store's products.
    """

    code: String(required=True, max_length=50)
    discount_type: String(required=True, choices=DiscountType)
    value: Decimal(required=True, min_value=0)
    valid_from: DateTime(required=True)
    valid_to: DateTime(required=True)
    minimum_order_amount: Decimal(min_value=0, default=decimal.Decimal("0"))
    applicable_store_id: Identifier()
    is_active: Boolean(default=True)
    is_used: Boolean(default=False)

    @invariant.post
    def percentage_must_be_a_fraction(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.value > 1:
            raise ValidationError({"value": ["Percentage discounts must be between 0 and 1"]})

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.valid_from and self.valid_to and _as_utc(self.valid_to) < _as_utc(self.valid_from):
            raise ValidationError({"valid_to": ["Valid to date cannot precede valid from date"]})

    @property
    def kind(self) -> DiscountType:
        return DiscountType(self.discount_type)

    def amount_for(self, subtotal: decimal.Decimal) -> decimal.Decimal:
        """Raw discount on ``subtotal``, before clamping against other discounts."""
        if self.kind is DiscountType.PERCENTAGE:
            return subtotal * self.value
        return self.value

    def eligibility_error(self, subtotal: decimal.Decimal, store_ids, as_of: datetime) -> str | None:
        """Why the code cannot be redeemed on this order, or None when it can."""
        if not self.is_active:
            return "Discount code is not active"
        if self.is_used:
            return "Discount code has already been used"

        now = _as_utc(as_of)
        if now < _as_utc(self.valid_from):
            return "Discount code is not yet valid"
        if now > _as_utc(self.valid_to):
            return "Discount code has expired"

        if subtotal < self.minimum_order_amount:
            return f"Minimum order amount of {self.minimum_order_amount} required"

        if self.applicable_store_id and self.applicable_store_id not in {str(s) for s in store_ids}:
            return "Discount code is not valid for this store"

        return None
