"""Historical order samples fed to the delivery metrics estimator.

Samples come straight from order history and are not validated on the way
in: statuses may be free text, timestamps naive or missing, totals absent.
The estimator copes with all of that, so this type stays permissive.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class OrderMetricsSample:
    order_id: str
    status: OrderStatus | str | None
    created_at: datetime | None
    total_amount: Decimal | float | int | None = None

    @property
    def status_key(self) -> str:
        """Lower-cased status name, empty when no status was recorded."""
        status = self.status
        if isinstance(status, Enum):
            status = status.value
        if status is None:
            return ""
        return str(status).strip().lower()
