"""
Payment rollups: paid, outstanding and revenue figures.
"""

import random
import uuid
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from ordertracker.utils.balances import (
    is_overpaid,
    monthly_sales_per_user,
    order_balances,
    outstanding,
    outstanding_orders,
    total_outstanding,
    total_paid,
    total_revenue,
)


def make_order(total_amount, **kwargs):
    fields = {
        "id": uuid.uuid4(),
        "user_id": uuid.uuid4(),
        "order_date": date(2024, 1, 1),
    }
    fields.update(kwargs)
    return SimpleNamespace(total_amount=Decimal(total_amount), **fields)


def pay(order, amount):
    return SimpleNamespace(order_id=order.id, amount=Decimal(amount))


def test_paid_and_outstanding():
    order = make_order("1000")
    payments = [pay(order, "300"), pay(order, "300")]
    
    assert total_paid(order.id, payments) == Decimal("600")
    assert outstanding(order, payments) == Decimal("400")


def test_overpayment_floors_outstanding_at_zero():
    order = make_order("500")
    payments = [pay(order, "600")]
    
    assert outstanding(order, payments) == Decimal("0")
    assert is_overpaid(order, payments)


def test_unpaid_order():
    order = make_order("250")
    
    assert total_paid(order.id, []) == Decimal("0")
    assert outstanding(order, []) == Decimal("250")
    assert not is_overpaid(order, [])


def test_total_paid_ignores_payment_order():
    order = make_order("1000")
    other = make_order("1000")
    payments = [pay(order, "10.25"), pay(other, "99"), pay(order, "0.75"), pay(order, "300")]
    shuffled = payments[:]
    random.Random(7).shuffle(shuffled)
    
    assert total_paid(order.id, payments) == total_paid(order.id, shuffled) == Decimal("311.00")


def test_order_balances_flags_overpaid():
    paid_off = make_order("100")
    overpaid = make_order("100")
    payments = [pay(paid_off, "100"), pay(overpaid, "150")]
    
    rows = {row.order.id: row for row in order_balances([paid_off, overpaid], payments)}
    
    assert rows[paid_off.id].outstanding == Decimal("0")
    assert not rows[paid_off.id].overpaid
    assert rows[overpaid.id].outstanding == Decimal("0")
    assert rows[overpaid.id].overpaid
    assert rows[overpaid.id].total_paid == Decimal("150")


def test_outstanding_orders_largest_first():
    small = make_order("100")
    large = make_order("900")
    settled = make_order("50")
    payments = [pay(large, "100"), pay(settled, "50")]
    
    rows = outstanding_orders([small, large, settled], payments)
    
    assert [row.order for row in rows] == [large, small]
    assert [row.outstanding for row in rows] == [Decimal("800"), Decimal("100")]


def test_revenue_and_outstanding_totals():
    a = make_order("1000")
    b = make_order("500")
    payments = [pay(a, "300"), pay(b, "600")]
    
    assert total_revenue([a, b]) == Decimal("1500")
    assert total_outstanding([a, b], payments) == Decimal("700")


def test_monthly_sales_per_user():
    owner = uuid.uuid4()
    other = uuid.uuid4()
    orders = [
        make_order("100", user_id=owner, order_date=date(2024, 1, 5)),
        make_order("50.50", user_id=owner, order_date=date(2024, 1, 28)),
        make_order("70", user_id=owner, order_date=date(2024, 2, 1)),
        make_order("10", user_id=other, order_date=date(2023, 12, 31)),
    ]
    
    assert monthly_sales_per_user(orders) == {
        owner: {"2024-01": Decimal("150.50"), "2024-02": Decimal("70")},
        other: {"2023-12": Decimal("10")},
    }
