"""Order statistics over an optional creation-date window."""

from collections import Counter
from datetime import UTC, date, datetime, time

from protean.utils.globals import current_domain

from ordering.errors import InvalidRequestError
from ordering.order.order import Order


def _window_bound(field, value, end=False):
    """Widen a bare date to the start (or end) of that day, in UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.max if end else time.min, tzinfo=UTC)
    raise InvalidRequestError(field, "must be a date or datetime")


def get_order_stats(start_date=None, end_date=None) -> dict:
    """Count, revenue and status breakdowns of orders created inside [start_date, end_date]."""
    start = _window_bound("start_date", start_date)
    end = _window_bound("end_date", end_date, end=True)
    if start and end and start > end:
        raise InvalidRequestError("start_date", "must not be after end_date")

    repo = current_domain.repository_for(Order)

    total_orders = 0
    revenue = 0.0
    by_status = Counter()
    by_payment_status = Counter()
    for order in repo.created_between(start, end):
        total_orders += 1
        revenue += order.total_amount or 0.0
        by_status[order.status] += 1
        by_payment_status[order.payment_status] += 1

    return {
        "total_orders": total_orders,
        "total_revenue": round(revenue, 2),
        "average_order_value": round(revenue / total_orders, 2) if total_orders else 0.0,
        "by_status": dict(by_status),
        "by_payment_status": dict(by_payment_status),
    }
