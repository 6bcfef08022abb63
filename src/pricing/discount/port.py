"""Discount resolver port (abstract interface).

Discount definitions live outside the pricing engine. The resolver looks a
code up and decides whether it can be redeemed on an order with the given
subtotal and stores.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from pricing.discount.discount import DiscountCode


@dataclass(frozen=True)
class DiscountValidation:
    """Result of validating one discount code."""

    is_valid: bool
    discount: DiscountCode | None = None
    error_message: str | None = None


class DiscountResolver(ABC):
    """Abstract discount lookup and validation interface."""

    @abstractmethod
    def validate(self, code: str, subtotal: Decimal, store_ids: list[str]) -> DiscountValidation:
        """Validate ``code`` against an order's subtotal and stores."""
        ...
