"""In-memory discount resolver for development and testing.

Codes are matched case-insensitively. Eligibility is checked against the
pricing domain's clock, so tests can pin "now" by swapping the clock.
"""

from decimal import Decimal

from pricing.discount.discount import DiscountCode
from pricing.discount.port import DiscountResolver, DiscountValidation
from pricing.domain import pricing


class FakeDiscountResolver(DiscountResolver):
    """Discount resolver backed by a dict of ``DiscountCode`` value objects."""

    def __init__(self) -> None:
        self.discounts: dict[str, DiscountCode] = {}
        self.calls: list[dict] = []

    def add_discount(self, discount: DiscountCode) -> None:
        self.discounts[discount.code.strip().upper()] = discount

    def validate(self, code: str, subtotal: Decimal, store_ids: list[str]) -> DiscountValidation:
        self.calls.append({"code": code, "subtotal": subtotal, "store_ids": list(store_ids)})

        discount = self.discounts.get(code.strip().upper())
        if discount is None:
            return DiscountValidation(is_valid=False, error_message="Discount code not found")

        error = discount.eligibility_error(subtotal, store_ids, pricing.clock.now())
        if error:
            return DiscountValidation(is_valid=False, error_message=error)
        return DiscountValidation(is_valid=True, discount=discount)
