"""
Dashboard rollups.
"""

from decimal import Decimal

import pytest


@pytest.fixture
async def book(test_client, alice, bob, api):
    """Alice has an overdue, an upcoming (overpaid) and a completed order; Bob has one."""
    client = await api.create_client(alice)
    overdue = await api.create_order(
        alice, client["id"], title="Overdue", order_date="2024-06-01", lead_time_days=7, total_amount="1000.00"
    )
    upcoming = await api.create_order(
        alice, client["id"], title="Upcoming", order_date="2024-06-03", lead_time_days=14, total_amount="500.00"
    )
    done = await api.create_order(
        alice, client["id"], title="Done", order_date="2024-05-01", lead_time_days=5, total_amount="200.00"
    )
    await test_client.put(f"/api/v1/orders/{done['id']}", json={"status": "completed"}, headers=alice.headers)
    await api.create_payment(alice, overdue, amount="300.00")
    await api.create_payment(alice, upcoming, amount="600.00")
    
    bob_client = await api.create_client(bob)
    await api.create_order(bob, bob_client["id"], title="Bob's", order_date="2024-04-10", total_amount="100.00")
    return {"overdue": overdue, "upcoming": upcoming, "done": done}


async def test_user_dashboard(test_client, alice, book):
    response = await test_client.get("/api/v1/dashboard", params={"today": "2024-06-10"}, headers=alice.headers)
    
    assert response.status_code == 200
    data = response.json()
    assert data["is_admin_view"] is False
    assert data["active_orders"] == 2
    assert Decimal(data["total_revenue"]) == Decimal("1700")
    assert Decimal(data["total_outstanding"]) == Decimal("900")
    assert data["outstanding_count"] == 2
    assert [row["title"] for row in data["outstanding_orders"]] == ["Overdue", "Done"]
    assert Decimal(data["outstanding_orders"][0]["outstanding"]) == Decimal("700")
    assert [o["id"] for o in data["overdue_orders"]] == [book["overdue"]["id"]]
    assert [o["id"] for o in data["upcoming_orders"]] == [book["upcoming"]["id"]]
    assert data["monthly_sales_per_user"] is None


async def test_admin_dashboard_sees_everyone(test_client, admin, alice, bob, book):
    response = await test_client.get("/api/v1/dashboard", params={"today": "2024-06-10"}, headers=admin.headers)
    
    data = response.json()
    assert data["is_admin_view"] is True
    assert Decimal(data["total_revenue"]) == Decimal("1800")
    
    sales = data["monthly_sales_per_user"]
    assert [row["user_name"] for row in sales] == ["Alice Smith", "Bob Jones"]
    assert Decimal(sales[0]["total"]) == Decimal("1700")
    assert {month: Decimal(value) for month, value in sales[0]["months"].items()} == {
        "2024-06": Decimal("1500"),
        "2024-05": Decimal("200"),
    }
    assert sales[1]["months"].keys() == {"2024-04"}


async def test_empty_dashboard(test_client, alice):
    data = (await test_client.get("/api/v1/dashboard", headers=alice.headers)).json()
    
    assert data["active_orders"] == 0
    assert Decimal(data["total_revenue"]) == Decimal("0")
    assert data["outstanding_orders"] == []
