"""
Client library: DataStore write policy, refresh guard and SessionProvider.
"""

import asyncio
import uuid
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from ordertracker.core.config import settings
from ordertracker.core.exceptions import AuthorizationError, FormValidationError, PersistenceError
from ordertracker.core.integrations.backend.reminders import send_reminder_emails
from ordertracker.core.integrations.backend.session import SessionProvider
from ordertracker.core.integrations.backend.store import DataStore
from ordertracker.core.integrations.http.http_client import HttpClient
from ordertracker.models.user import UserRole
from ordertracker.schemas.client import ClientResponse
from ordertracker.schemas.order import OrderResponse
from ordertracker.schemas.payment import PaymentResponse
from ordertracker.schemas.user import Identity, LoginResponse, TokenResponse, UserResponse

OWNER_ID = uuid.uuid4()


def client_row(**overrides):
    fields = {
        "id": uuid.uuid4(),
        "user_id": OWNER_ID,
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-0100",
        "address": "1 Main St",
    }
    fields.update(overrides)
    return ClientResponse(**fields)


def order_row(client_id, **overrides):
    fields = {
        "id": uuid.uuid4(),
        "user_id": OWNER_ID,
        "title": "Kitchen",
        "description": "Oak",
        "client_id": client_id,
        "order_date": date(2024, 1, 1),
        "lead_time_days": 14,
        "installation_date": date(2024, 1, 15),
        "total_amount": Decimal("1000"),
    }
    fields.update(overrides)
    return OrderResponse(**fields)


def payment_row(order, amount):
    return PaymentResponse(
        id=uuid.uuid4(),
        user_id=OWNER_ID,
        order_id=order.id,
        client_id=order.client_id,
        amount=Decimal(amount),
        payment_date=date(2024, 1, 2),
    )


class FakeGateway:
    """In-process stand-in for BackendGateway."""
    
    def __init__(self):
        self.clients = []
        self.orders = []
        self.payments = []
        self.users = []
        self.calls = []
        self.fail_with = None
        self.list_delay = 0
    
    def _check(self, name):
        self.calls.append(name)
        if self.fail_with:
            raise PersistenceError(self.fail_with)
    
    async def list_clients(self):
        self._check("list_clients")
        await asyncio.sleep(self.list_delay)
        return list(self.clients)
    
    async def list_orders(self):
        self._check("list_orders")
        return list(self.orders)
    
    async def list_payments(self):
        self._check("list_payments")
        return list(self.payments)
    
    async def list_users(self):
        self._check("list_users")
        return list(self.users)
    
    async def create_client(self, data):
        self._check("create_client")
        return client_row(**data.model_dump())
    
    async def update_client(self, client_id, data):
        self._check("update_client")
        current = next(c for c in self.clients if c.id == client_id)
        return current.model_copy(update=data.model_dump(exclude_unset=True))
    
    async def delete_client(self, client_id):
        self._check("delete_client")
    
    async def create_payment(self, data):
        self._check("create_payment")
        return PaymentResponse(id=uuid.uuid4(), user_id=OWNER_ID, **data.model_dump())


@pytest.fixture
def gateway():
    return FakeGateway()


def signed_in(role=UserRole.USER):
    return SimpleNamespace(identity=Identity(user_id=OWNER_ID, role=role))


async def test_refresh_loads_visible_rows(gateway):
    client = client_row()
    order = order_row(client.id)
    gateway.clients, gateway.orders = [client], [order]
    gateway.payments = [payment_row(order, "300"), payment_row(order, "300")]
    store = DataStore(gateway, signed_in())
    
    assert await store.refresh() is True
    
    assert store.clients == [client]
    assert store.total_paid(order.id) == Decimal("600")
    assert store.outstanding(order.id) == Decimal("400")
    assert "list_users" not in gateway.calls


async def test_admin_refresh_loads_users(gateway):
    admin_id = uuid.uuid4()
    gateway.users = [UserResponse(id=admin_id, email="a@example.com", full_name="Ada", role=UserRole.ADMIN)]
    store = DataStore(gateway, signed_in(UserRole.ADMIN))
    
    await store.refresh()
    
    assert store.user_name(admin_id) == "Ada"
    unknown = uuid.uuid4()
    assert store.user_name(unknown) == str(unknown)[:8] + "..."


async def test_refresh_requires_identity(gateway):
    store = DataStore(gateway, SimpleNamespace(identity=None))
    
    with pytest.raises(AuthorizationError):
        await store.refresh()
    assert gateway.calls == []


async def test_overlapping_refresh_is_a_no_op(gateway):
    gateway.list_delay = 0.01
    store = DataStore(gateway, signed_in())
    
    first, second = await asyncio.gather(store.refresh(), store.refresh())
    
    assert (first, second) == (True, False)
    assert gateway.calls.count("list_clients") == 1
    assert store.loading is False


async def test_failed_refresh_keeps_previous_state(gateway):
    client = client_row()
    gateway.clients = [client]
    store = DataStore(gateway, signed_in())
    await store.refresh()
    
    gateway.clients = []
    gateway.fail_with = "backend down"
    with pytest.raises(PersistenceError):
        await store.refresh()
    
    assert store.clients == [client]
    assert store.loading is False


async def test_successful_write_applies_server_row(gateway):
    store = DataStore(gateway, signed_in())
    
    created = await store.add_client(
        {"name": "Jane", "email": "jane@example.com", "phone": "555", "address": "1 Main St"}
    )
    
    assert store.clients == [created]
    assert created.user_id == OWNER_ID


async def test_failed_write_leaves_state_unchanged(gateway):
    existing = client_row()
    gateway.clients = [existing]
    store = DataStore(gateway, signed_in())
    await store.refresh()
    
    gateway.fail_with = "new row violates row-level security policy"
    with pytest.raises(PersistenceError) as excinfo:
        await store.update_client(existing.id, {"name": "Renamed"})
    with pytest.raises(PersistenceError):
        await store.delete_client(existing.id)
    
    assert excinfo.value.message == "new row violates row-level security policy"
    assert store.clients == [existing]


async def test_update_and_delete_apply_after_confirmation(gateway):
    existing = client_row()
    gateway.clients = [existing]
    store = DataStore(gateway, signed_in())
    await store.refresh()
    
    updated = await store.update_client(existing.id, {"phone": "555-9999"})
    assert store.clients == [updated]
    assert updated.phone == "555-9999"
    
    await store.delete_client(existing.id)
    assert store.clients == []


async def test_validation_blocks_the_network_call(gateway):
    store = DataStore(gateway, signed_in())
    
    with pytest.raises(FormValidationError) as excinfo:
        await store.add_client({"name": "", "email": "nope", "phone": "555", "address": "x"})
    
    assert set(excinfo.value.field_errors) == {"name", "email"}
    assert gateway.calls == []


async def test_non_positive_payment_is_blocked(gateway):
    store = DataStore(gateway, signed_in())
    
    with pytest.raises(FormValidationError) as excinfo:
        await store.add_payment({"order_id": str(uuid.uuid4()), "client_id": str(uuid.uuid4()), "amount": "-5"})
    
    assert "amount" in excinfo.value.field_errors
    assert gateway.calls == []


class FakeSessionGateway:
    """Gateway stand-in for SessionProvider."""
    
    def __init__(self, me_error=None):
        self.http = HttpClient(base_url="http://test")
        self.me_error = me_error
        self.user = UserResponse(id=OWNER_ID, email="alice@example.com", full_name="Alice", role=UserRole.USER)
    
    async def login(self, credentials):
        if credentials.password != "secret123":
            raise PersistenceError("Invalid email or password", status_code=401)
        return LoginResponse(
            token=TokenResponse(access_token="token-123", expires_in=3600),
            user=self.user,
        )
    
    async def me(self):
        if self.me_error:
            raise self.me_error
        return self.user


async def test_sign_in_and_out():
    provider = SessionProvider(FakeSessionGateway())
    
    identity = await provider.sign_in("alice@example.com", "secret123")
    
    assert identity.user_id == OWNER_ID
    assert provider.token == "token-123"
    assert provider.resolving is False
    
    provider.sign_out()
    assert provider.identity is None
    assert provider.token is None


async def test_failed_sign_in_leaves_session_empty():
    provider = SessionProvider(FakeSessionGateway())
    
    with pytest.raises(PersistenceError):
        await provider.sign_in("alice@example.com", "wrong")
    
    assert provider.identity is None
    assert provider.resolving is False


async def test_resolve_stored_token():
    provider = SessionProvider(FakeSessionGateway(), token="stored")
    
    identity = await provider.resolve()
    
    assert identity.email == "alice@example.com"


async def test_resolve_rejected_token_signs_out():
    provider = SessionProvider(
        FakeSessionGateway(me_error=PersistenceError("Invalid authentication token", status_code=401)),
        token="expired",
    )
    
    assert await provider.resolve() is None
    assert provider.token is None


async def test_resolve_transport_failure_propagates():
    provider = SessionProvider(
        FakeSessionGateway(me_error=PersistenceError("Connection refused", status_code=503)),
        token="stored",
    )
    
    with pytest.raises(PersistenceError):
        await provider.resolve()
    assert provider.token == "stored"
    assert provider.resolving is False


def test_error_message_from_envelope():
    assert HttpClient._error_message({"error": {"message": "Order not found"}}, "fallback") == "Order not found"
    assert HttpClient._error_message({"success": False, "error": "boom"}, "fallback") == "boom"
    assert HttpClient._error_message({"detail": "Not authenticated"}, "fallback") == "Not authenticated"
    assert HttpClient._error_message(None, "fallback") == "fallback"


async def test_send_reminder_emails_posts_with_anon_key():
    calls = []
    
    class RecordingHttp:
        async def post(self, endpoint, json=None, headers=None):
            calls.append((endpoint, headers))
            return {"success": True, "processed": 0, "results": []}
    
    result = await send_reminder_emails(RecordingHttp(), settings)
    
    assert result.processed == 0
    assert calls == [
        ("/functions/v1/send-reminder-emails", {"Authorization": f"Bearer {settings.ANON_KEY}"})
    ]


async def test_clearing_a_field_is_blocked(gateway):
    store = DataStore(gateway, signed_in())
    
    with pytest.raises(FormValidationError) as excinfo:
        await store.update_order(uuid.uuid4(), {"title": None})
    
    assert "title" in excinfo.value.field_errors
    assert gateway.calls == []


class FakeResponse:
    """aiohttp response whose body is not JSON."""
    
    def __init__(self, status, reason):
        self.status = status
        self.reason = reason
    
    async def json(self, content_type=None):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, *exc):
        return False


class FakeHttpSession:
    closed = False
    
    def __init__(self, response):
        self.response = response
    
    def request(self, method, url, **kwargs):
        return self.response


async def test_html_error_page_becomes_persistence_error():
    client = HttpClient(base_url="http://backend")
    client._session = FakeHttpSession(FakeResponse(502, "Bad Gateway"))
    
    with pytest.raises(PersistenceError) as excinfo:
        await client.get("/api/v1/orders")
    
    assert excinfo.value.status_code == 502
    assert excinfo.value.message == "Bad Gateway"


async def test_malformed_success_body_becomes_persistence_error():
    client = HttpClient(base_url="http://backend")
    client._session = FakeHttpSession(FakeResponse(200, "OK"))
    
    with pytest.raises(PersistenceError) as excinfo:
        await client.get("/api/v1/orders")
    
    assert excinfo.value.message == "Malformed response from server"
