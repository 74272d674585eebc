"""
Installation date derivation and order date views.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from ordertracker.models.order import OrderStatus
from ordertracker.utils.scheduling import (
    compute_installation_date,
    filter_orders,
    is_active,
    lead_time_for_installation,
    orders_by_day,
    orders_for_day,
    overdue_orders,
    upcoming_orders,
)


def make_order(installation_date, status=OrderStatus.PENDING, **kwargs):
    fields = {
        "title": "Order",
        "description": "",
        "client": None,
        "reminder_sent": False,
    }
    fields.update(kwargs)
    return SimpleNamespace(installation_date=installation_date, status=status, **fields)


def test_installation_date_adds_lead_time():
    assert compute_installation_date(date(2024, 1, 1), 14) == date(2024, 1, 15)


def test_installation_date_crosses_year_boundary():
    assert compute_installation_date(date(2023, 12, 25), 10) == date(2024, 1, 4)


def test_lead_time_from_installation_date():
    assert lead_time_for_installation(date(2024, 1, 1), date(2024, 1, 15)) == 14
    # Never below one day
    assert lead_time_for_installation(date(2024, 1, 15), date(2024, 1, 1)) == 1


@pytest.mark.parametrize(
    "status,active",
    [
        (OrderStatus.PENDING, True),
        (OrderStatus.CONFIRMED, True),
        (OrderStatus.IN_PROGRESS, True),
        (OrderStatus.COMPLETED, False),
        (OrderStatus.CANCELLED, False),
    ],
)
def test_is_active(status, active):
    assert is_active(make_order(date(2024, 6, 1), status)) is active


def test_upcoming_but_not_overdue():
    today = date(2024, 6, 10)
    order = make_order(date(2024, 6, 17), OrderStatus.PENDING)
    
    assert upcoming_orders([order], today) == [order]
    assert overdue_orders([order], today) == []


def test_past_open_order_is_overdue():
    today = date(2024, 6, 10)
    order = make_order(date(2024, 6, 1), OrderStatus.IN_PROGRESS)
    
    assert overdue_orders([order], today) == [order]


def test_closed_orders_are_never_overdue():
    today = date(2024, 6, 10)
    orders = [
        make_order(date(2024, 6, 1), OrderStatus.COMPLETED),
        make_order(date(2024, 6, 1), OrderStatus.CANCELLED),
    ]
    
    assert overdue_orders(orders, today) == []


def test_upcoming_window_is_inclusive():
    today = date(2024, 6, 10)
    on_day = make_order(date(2024, 6, 10))
    last_day = make_order(date(2024, 6, 17))
    too_far = make_order(date(2024, 6, 18))
    yesterday = make_order(date(2024, 6, 9))
    
    assert upcoming_orders([on_day, last_day, too_far, yesterday], today) == [on_day, last_day]


def test_orders_for_day():
    first = make_order(date(2024, 6, 5))
    second = make_order(date(2024, 6, 6))
    
    assert orders_for_day([first, second], date(2024, 6, 6)) == [second]


def test_orders_by_day_groups_one_month():
    a = make_order(date(2024, 2, 29), title="a")
    b = make_order(date(2024, 2, 3), title="b")
    c = make_order(date(2024, 2, 3), title="c")
    outside = make_order(date(2024, 3, 1), title="outside")
    
    grouped = orders_by_day([a, b, c, outside], 2024, 2)
    
    assert list(grouped) == [date(2024, 2, 3), date(2024, 2, 29)]
    assert grouped[date(2024, 2, 3)] == [b, c]
    assert grouped[date(2024, 2, 29)] == [a]


def test_filter_orders_searches_title_description_and_client():
    kitchen = make_order(date(2024, 6, 1), title="Kitchen", description="oak")
    bath = make_order(
        date(2024, 6, 1),
        title="Bathroom",
        description="tiles",
        client=SimpleNamespace(name="Oakley Ltd"),
    )
    other = make_order(date(2024, 6, 1), title="Garage", description="door", status=OrderStatus.COMPLETED)
    orders = [kitchen, bath, other]
    
    assert filter_orders(orders, search="OAK") == [kitchen, bath]
    assert filter_orders(orders, status="completed") == [other]
    assert filter_orders(orders, search="garage", status="pending") == []
    assert filter_orders(orders) == orders
