"""Delivery metrics estimation: processing and delivery durations from order history.

Read-only analytics meant to run as a periodic batch job. Estimates are
heuristic: each order's age is scaled by status-specific factors, and
delivery estimates are further stretched by order value, age, season and
weekday. Bad samples never fail the batch; they fall back to fixed defaults
(24h processing, 72h delivery) and are logged.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

import structlog

from pricing.domain import pricing
from pricing.metrics.samples import OrderMetricsSample

logger = structlog.get_logger(__name__)

DEFAULT_PROCESSING_HOURS = 24.0
DEFAULT_DELIVERY_HOURS = 72.0

MIN_PROCESSING_HOURS = 1.0
MAX_PROCESSING_HOURS = 120.0
MIN_DELIVERY_HOURS = 0.0
MAX_DELIVERY_HOURS = 168.0
MIN_MULTIPLIER = 0.5
MAX_MULTIPLIER = 3.0

PROCESSED_STATUSES = frozenset({"shipped", "delivered", "cancelled"})
DELIVERED_STATUSES = frozenset({"delivered"})

# status -> (share of order age, cap in hours)
_PROCESSING_RULES = {
    "pending": (1.0, 24.0),
    "processing": (1.0, 48.0),
    "confirmed": (1.0, 72.0),
    "shipped": (0.5, 48.0),
    "delivered": (0.4, 48.0),
    "cancelled": (1.0, 24.0),
}
_UNKNOWN_PROCESSING_RULE = (1.0, 72.0)

_DELIVERY_RULES = {
    "pending": (0.0, 0.0),
    "processing": (0.0, 0.0),
    "confirmed": (0.0, 0.0),
    "cancelled": (0.0, 0.0),
    "shipped": (0.5, 72.0),
    "delivered": (0.6, 120.0),
}
_UNKNOWN_DELIVERY_RULE = (0.5, 96.0)

_STATUS_FACTORS = {
    "shipped": 1.0,
    "delivered": 0.9,
    "processing": 1.2,
    "confirmed": 1.2,
}
_OTHER_STATUS_FACTOR = 1.1


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True)
class DeliveryMetricsReport:
    """Averages produced by one batch run."""

    average_processing_hours: float
    average_delivery_hours: float
    processing_samples: int
    delivery_samples: int
    as_of: datetime


class DeliveryMetricsEstimator:
    """Estimate processing and delivery durations for historical orders.

    Ages are measured against ``as_of``. When it is not given, the pricing
    domain's clock is read at the start of each call.
    """

    def __init__(self, as_of: datetime | None = None) -> None:
        self.as_of = as_of

    def _now(self) -> datetime:
        return _as_utc(self.as_of or pricing.clock.now())

    @staticmethod
    def _age_hours(order: OrderMetricsSample, now: datetime) -> float:
        if order.created_at is None:
            raise ValueError(f"Order {order.order_id} has no creation time")
        return (now - _as_utc(order.created_at)).total_seconds() / 3600

    # ------------------------------------------------------------------
    # Per-order estimates
    # ------------------------------------------------------------------

    def _processing_hours(self, order: OrderMetricsSample, now: datetime) -> float:
        share, cap = _PROCESSING_RULES.get(order.status_key, _UNKNOWN_PROCESSING_RULE)
        hours = min(self._age_hours(order, now) * share, cap)
        return _clamp(hours, MIN_PROCESSING_HOURS, MAX_PROCESSING_HOURS)

    def _delivery_hours(self, order: OrderMetricsSample, now: datetime) -> float:
        share, cap = _DELIVERY_RULES.get(order.status_key, _UNKNOWN_DELIVERY_RULE)
        hours = min(self._age_hours(order, now) * share, cap)
        hours = _clamp(hours, MIN_DELIVERY_HOURS, MAX_DELIVERY_HOURS)
        hours *= self._delivery_multiplier(order, now)
        return _clamp(hours, MIN_DELIVERY_HOURS, MAX_DELIVERY_HOURS)

    def _delivery_multiplier(self, order: OrderMetricsSample, now: datetime) -> float:
        try:
            total = Decimal(str(order.total_amount))
            if total > 1000:
                multiplier = 1.2
            elif total > 500:
                multiplier = 1.1
            else:
                multiplier = 1.0

            age_days = int(self._age_hours(order, now) / 24)
            if age_days > 30:
                multiplier *= 1.3
            elif age_days > 14:
                multiplier *= 1.1

            multiplier *= _STATUS_FACTORS.get(order.status_key, _OTHER_STATUS_FACTOR)

            if now.month in (12, 1):
                multiplier *= 1.4
            elif now.month == 11:
                multiplier *= 1.2

            # Saturday and Sunday
            if now.weekday() >= 5:
                multiplier *= 1.1

            return _clamp(multiplier, MIN_MULTIPLIER, MAX_MULTIPLIER)
        except Exception:
            logger.exception("Delivery multiplier failed, using 1.0", order_id=order.order_id)
            return 1.0

    def calculate_order_processing_time(self, order: OrderMetricsSample) -> float:
        try:
            return self._processing_hours(order, self._now())
        except Exception:
            logger.exception("Processing time estimate failed", order_id=getattr(order, "order_id", None))
            return DEFAULT_PROCESSING_HOURS

    def calculate_order_delivery_time(self, order: OrderMetricsSample) -> float:
        try:
            return self._delivery_hours(order, self._now())
        except Exception:
            logger.exception("Delivery time estimate failed", order_id=getattr(order, "order_id", None))
            return DEFAULT_DELIVERY_HOURS

    # ------------------------------------------------------------------
    # Averages
    # ------------------------------------------------------------------

    def _average(
        self,
        orders: Iterable[OrderMetricsSample],
        statuses: frozenset[str],
        estimate: Callable[[OrderMetricsSample, datetime], float],
        default: float,
        now: datetime,
    ) -> tuple[float, int]:
        values = []
        for order in orders:
            try:
                if order.status_key not in statuses:
                    continue
                value = estimate(order, now)
            except Exception:
                logger.warning(
                    "Skipping unusable order sample",
                    order_id=getattr(order, "order_id", None),
                    exc_info=True,
                )
                continue
            if value > 0:
                values.append(value)

        if not values:
            return default, 0
        return sum(values) / len(values), len(values)

    def calculate_average_processing_time(self, orders: Iterable[OrderMetricsSample]) -> float:
        try:
            average, _ = self._average(
                orders, PROCESSED_STATUSES, self._processing_hours, DEFAULT_PROCESSING_HOURS, self._now()
            )
            return average
        except Exception:
            logger.exception("Average processing time failed")
            return DEFAULT_PROCESSING_HOURS

    def calculate_average_delivery_time(self, orders: Iterable[OrderMetricsSample]) -> float:
        try:
            average, _ = self._average(
                orders, DELIVERED_STATUSES, self._delivery_hours, DEFAULT_DELIVERY_HOURS, self._now()
            )
            return average
        except Exception:
            logger.exception("Average delivery time failed")
            return DEFAULT_DELIVERY_HOURS

    def estimate(self, orders: Iterable[OrderMetricsSample]) -> DeliveryMetricsReport:
        """Compute both averages in one pass over ``orders``."""
        now = self._now()
        orders = list(orders or ())

        try:
            processing, processing_count = self._average(
                orders, PROCESSED_STATUSES, self._processing_hours, DEFAULT_PROCESSING_HOURS, now
            )
        except Exception:
            logger.exception("Average processing time failed")
            processing, processing_count = DEFAULT_PROCESSING_HOURS, 0

        try:
            delivery, delivery_count = self._average(
                orders, DELIVERED_STATUSES, self._delivery_hours, DEFAULT_DELIVERY_HOURS, now
            )
        except Exception:
            logger.exception("Average delivery time failed")
            delivery, delivery_count = DEFAULT_DELIVERY_HOURS, 0

        logger.info(
            "Delivery metrics estimated",
            orders=len(orders),
            average_processing_hours=round(processing, 2),
            average_delivery_hours=round(delivery, 2),
            processing_samples=processing_count,
            delivery_samples=delivery_count,
        )

        return DeliveryMetricsReport(
            average_processing_hours=processing,
            average_delivery_hours=delivery,
            processing_samples=processing_count,
            delivery_samples=delivery_count,
            as_of=now,
        )
