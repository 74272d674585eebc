"""
Payment and revenue rollups over in-memory rows.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List
from uuid import UUID

ZERO = Decimal("0")


def _money(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def total_paid(order_id: UUID, payments: Iterable[Any]) -> Decimal:
    """Sum of payments recorded against one order; zero when there are none."""
    return sum(
        (_money(p.amount) for p in payments if p.order_id == order_id),
        ZERO,
    )


def outstanding(order, payments: Iterable[Any]) -> Decimal:
    """Unpaid balance of an order, floored at zero."""
    return max(ZERO, _money(order.total_amount) - total_paid(order.id, payments))


def is_overpaid(order, payments: Iterable[Any]) -> bool:
    """True when recorded payments exceed the order total."""
    return total_paid(order.id, payments) > _money(order.total_amount)


@dataclass
class OrderBalance:
    """An order with its payment position."""
    order: Any
    total_paid: Decimal
    outstanding: Decimal
    overpaid: bool


def order_balances(orders: Iterable[Any], payments: Iterable[Any]) -> List[OrderBalance]:
    """Balance row for every order."""
    payments = list(payments)
    balances = []
    for order in orders:
        paid = total_paid(order.id, payments)
        total = _money(order.total_amount)
        balances.append(
            OrderBalance(
                order=order,
                total_paid=paid,
                outstanding=max(ZERO, total - paid),
                overpaid=paid > total,
            )
        )
    return balances


def outstanding_orders(orders: Iterable[Any], payments: Iterable[Any]) -> List[OrderBalance]:
    """Orders with an unpaid balance, largest balance first."""
    rows = [row for row in order_balances(orders, payments) if row.outstanding > ZERO]
    rows.sort(key=lambda row: row.outstanding, reverse=True)
    return rows


def total_revenue(orders: Iterable[Any]) -> Decimal:
    """Sum of order totals."""
    return sum((_money(o.total_amount) for o in orders), ZERO)


def total_outstanding(orders: Iterable[Any], payments: Iterable[Any]) -> Decimal:
    """Sum of outstanding balances across orders."""
    payments = list(payments)
    return sum((outstanding(o, payments) for o in orders), ZERO)


def monthly_sales_per_user(orders: Iterable[Any]) -> Dict[UUID, Dict[str, Decimal]]:
    """
    Revenue per owner per calendar month of the order date.

    Returns:
        {user_id: {"YYYY-MM": summed total_amount}}
    """
    monthly: Dict[UUID, Dict[str, Decimal]] = {}
    for order in orders:
        year_month = f"{order.order_date.year:04d}-{order.order_date.month:02d}"
        months = monthly.setdefault(order.user_id, {})
        months[year_month] = months.get(year_month, ZERO) + _money(order.total_amount)
    return monthly
