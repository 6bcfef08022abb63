"""Order line requests as submitted at checkout."""

from protean.fields import Identifier, Integer

from pricing.domain import pricing


@pricing.value_object
class OrderLineRequest:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
