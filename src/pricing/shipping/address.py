"""ShippingAddress value object: the destination of an order."""

from protean.fields import String

from pricing.domain import pricing


@pricing.value_object
class ShippingAddress:
    """Where the order is going.

    ``state`` holds the governorate for Egyptian addresses. Postal codes are
    optional because most supported countries zone by city and governorate.
    """

    city: String(required=True, max_length=100)
    state: String(max_length=100)
    country: String(required=True, max_length=100)
    postal_code: String(max_length=20)

    def describe(self) -> str:
        return ", ".join(part for part in (self.city, self.state, self.country) if part)
