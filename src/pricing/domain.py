"""Pricing bounded context: Order Pricing and Delivery Estimation.

Turns a cart of line items, a destination address and discount codes into a
subtotal, per-store shipping cost, stacked discount and grand total. Also
hosts the read-only delivery metrics estimator that runs over historical
orders.
"""

import structlog
from protean.domain import Domain

pricing = Domain(name="pricing")

logger = structlog.get_logger(__name__)
