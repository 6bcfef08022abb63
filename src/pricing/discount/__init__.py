"""Discount resolver factory.

Provides get_discount_resolver() / set_discount_resolver(). Defaults to the
in-memory FakeDiscountResolver.
"""

from pricing.discount.fake_adapter import FakeDiscountResolver
from pricing.discount.port import DiscountResolver

_current_resolver: DiscountResolver | None = None


def get_discount_resolver() -> DiscountResolver:
    """Return the current discount resolver. Defaults to FakeDiscountResolver."""
    global _current_resolver
    if _current_resolver is None:
        _current_resolver = FakeDiscountResolver()
    return _current_resolver


def set_discount_resolver(resolver: DiscountResolver) -> None:
    """Override the active discount resolver (useful for tests)."""
    global _current_resolver
    _current_resolver = resolver


def reset_discount_resolver() -> None:
    """Reset to default resolver."""
    global _current_resolver
    _current_resolver = None
