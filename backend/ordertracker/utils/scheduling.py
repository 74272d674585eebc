"""
Installation scheduling derivations.

All functions work on any object exposing the order attributes they read
(ORM rows or response schemas) and assume well-formed input.
"""

from calendar import monthrange
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, TypeVar

from ordertracker.models.order import CLOSED_STATUSES, OrderStatus

OrderT = TypeVar("OrderT")

DEFAULT_UPCOMING_HORIZON_DAYS = 7


def compute_installation_date(order_date: date, lead_time_days: int) -> date:
    """
    Installation date for an order.

    Args:
        order_date: Day the order was placed
        lead_time_days: Calendar days until installation

    Returns:
        order_date + lead_time_days
    """
    return order_date + timedelta(days=lead_time_days)


def lead_time_for_installation(order_date: date, installation_date: date) -> int:
    """Lead time that lands an order placed on order_date on installation_date (at least one day)."""
    return max(1, (installation_date - order_date).days)


def _status(order) -> OrderStatus:
    return OrderStatus(order.status)


def is_active(order) -> bool:
    """An order is active until it is completed or cancelled."""
    return _status(order) not in CLOSED_STATUSES


def overdue_orders(orders: Iterable[OrderT], today: date) -> List[OrderT]:
    """Orders whose installation day has passed and which are still open."""
    return [
        order for order in orders
        if order.installation_date < today and is_active(order)
    ]


def upcoming_orders(
    orders: Iterable[OrderT],
    today: date,
    horizon_days: int = DEFAULT_UPCOMING_HORIZON_DAYS,
) -> List[OrderT]:
    """
    Orders installing within the next horizon_days days.

    Whole-day granularity; both ends are inclusive, so an installation today
    and one exactly horizon_days out both count.
    """
    return [
        order for order in orders
        if 0 <= (order.installation_date - today).days <= horizon_days
    ]


def orders_for_day(orders: Iterable[OrderT], day: date) -> List[OrderT]:
    """Orders installing on the given day."""
    return [order for order in orders if order.installation_date == day]


def orders_by_day(orders: Iterable[OrderT], year: int, month: int) -> Dict[date, List[OrderT]]:
    """Group a month's installations by day. Days without installations are omitted."""
    first = date(year, month, 1)
    last = date(year, month, monthrange(year, month)[1])
    grouped: Dict[date, List[OrderT]] = {}
    for order in sorted(orders, key=lambda o: o.installation_date):
        if first <= order.installation_date <= last:
            grouped.setdefault(order.installation_date, []).append(order)
    return grouped


def filter_orders(
    orders: Iterable[OrderT],
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[OrderT]:
    """
    Case-insensitive search over title, description and client name,
    optionally restricted to one status.
    """
    term = (search or "").strip().lower()
    matches = []
    for order in orders:
        if status and _status(order).value != status:
            continue
        if term:
            client = getattr(order, "client", None)
            haystack = [order.title, order.description, client.name if client else ""]
            if not any(term in (text or "").lower() for text in haystack):
                continue
        matches.append(order)
    return matches
