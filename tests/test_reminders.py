"""
Reminder function: selection, idempotence, failures and CORS.
"""

import uuid
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

from ordertracker.services.email_service import EmailDeliveryError, EmailService
from ordertracker.services.reminder_service import ReminderService

FUNCTION_URL = "/functions/v1/send-reminder-emails"
ANON_HEADERS = {"Authorization": "Bearer test-anon-key"}


async def _order_installing_in(api, user, client, days, **overrides):
    return await api.create_order(
        user, client["id"], order_date=date.today().isoformat(), lead_time_days=days, **overrides
    )


async def test_reminds_orders_three_days_out(test_client, alice, api):
    client = await api.create_client(alice, email="jane@example.com")
    due = await _order_installing_in(api, alice, client, 3, title="Due")
    await _order_installing_in(api, alice, client, 4, title="Later")
    cancelled = await _order_installing_in(api, alice, client, 3, title="Cancelled")
    await test_client.put(f"/api/v1/orders/{cancelled['id']}", json={"status": "cancelled"}, headers=alice.headers)
    
    response = await test_client.post(FUNCTION_URL, headers=ANON_HEADERS)
    
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["processed"] == 1
    assert body["results"] == [
        {"order_id": due["id"], "client_email": "jane@example.com", "status": "sent", "error": None}
    ]
    reloaded = (await test_client.get(f"/api/v1/orders/{due['id']}", headers=alice.headers)).json()
    assert reloaded["reminder_sent"] is True


async def test_second_run_processes_nothing(test_client, alice, api):
    client = await api.create_client(alice)
    await _order_installing_in(api, alice, client, 3)
    
    first = await test_client.post(FUNCTION_URL, headers=ANON_HEADERS)
    second = await test_client.post(FUNCTION_URL, headers=ANON_HEADERS)
    
    assert first.json()["processed"] == 1
    assert second.json() == {"success": True, "processed": 0, "results": []}


async def test_user_token_is_accepted(test_client, alice):
    response = await test_client.post(FUNCTION_URL, headers=alice.headers)
    
    assert response.status_code == 200


async def test_requires_key(test_client):
    missing = await test_client.post(FUNCTION_URL)
    wrong = await test_client.post(FUNCTION_URL, headers={"Authorization": "Bearer wrong"})
    
    assert missing.status_code in (401, 403)
    assert wrong.status_code == 401


async def test_cors_preflight_allows_any_origin(test_client):
    response = await test_client.options(
        FUNCTION_URL,
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, content-type",
        },
    )
    
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


class FlakyEmailService(EmailService):
    """Fails for one recipient."""
    
    def __init__(self, failing_address):
        self.failing_address = failing_address
    
    async def send(self, email):
        if email.to == self.failing_address:
            raise EmailDeliveryError("mailbox unavailable")
        await super().send(email)


async def test_failure_is_recorded_and_batch_continues(test_db_session, alice, api):
    bounced = await api.create_client(alice, name="Bounce", email="bounce@example.com")
    fine = await api.create_client(alice, name="Fine", email="fine@example.com")
    failed_order = await _order_installing_in(api, alice, bounced, 3)
    sent_order = await _order_installing_in(api, alice, fine, 3)
    today = date.today()
    
    service = ReminderService(test_db_session, FlakyEmailService("bounce@example.com"))
    result = await service.dispatch(today)
    
    by_order = {str(row.order_id): row for row in result.results}
    assert result.processed == 2
    assert by_order[failed_order["id"]].status == "failed"
    assert by_order[failed_order["id"]].error == "mailbox unavailable"
    assert by_order[sent_order["id"]].status == "sent"
    
    # The failed order is retried on the next run
    retry = await service.dispatch(today)
    assert [str(row.order_id) for row in retry.results] == [failed_order["id"]]


async def test_dispatch_uses_reference_day(test_db_session, alice, api):
    client = await api.create_client(alice)
    order = await api.create_order(alice, client["id"], order_date="2024-06-01", lead_time_days=9)
    
    service = ReminderService(test_db_session, EmailService())
    early = await service.dispatch(date(2024, 6, 6))
    on_time = await service.dispatch(date(2024, 6, 7))
    
    assert early.processed == 0
    assert [str(row.order_id) for row in on_time.results] == [order["id"]]
    assert date(2024, 6, 7) + timedelta(days=3) == date.fromisoformat(order["installation_date"])


def test_reminder_html_escapes_user_text():
    client = SimpleNamespace(name="Tom & Jerry", email="tom@example.com", address="1 <b>Main</b> St")
    order = SimpleNamespace(
        id=uuid.uuid4(),
        title="<script>alert(1)</script>",
        description="Cabinets",
        notes=None,
        installation_date=date(2024, 3, 4),
        total_amount=Decimal("1000.00"),
        client=client,
    )
    
    email = EmailService().build_reminder(order)
    
    assert "&lt;script&gt;" in email.html
    assert "<script>" not in email.html
    assert "Tom &amp; Jerry" in email.html
    assert "<b>Main</b>" not in email.html
    assert email.subject == "Installation reminder: <script>alert(1)</script>"
