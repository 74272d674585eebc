"""
Client-side cache of everything the signed-in user can see.

Writes are confirm-then-apply: local lists change only after the backend
returns the stored row. A failed write leaves them untouched.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from ordertracker.core.exceptions import AuthorizationError, FormValidationError, field_messages
from ordertracker.core.integrations.backend.gateway import BackendGateway
from ordertracker.core.integrations.backend.session import SessionProvider
from ordertracker.core.logging import get_logger
from ordertracker.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from ordertracker.schemas.order import OrderCreate, OrderUpdate, OrderResponse
from ordertracker.schemas.payment import PaymentCreate, PaymentUpdate, PaymentResponse
from ordertracker.schemas.user import UserResponse
from ordertracker.services.user_service import display_name
from ordertracker.utils import balances

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_form(schema: Type[SchemaT], data: Dict[str, Any]) -> SchemaT:
    """
    Validate raw form input before any network call.
    
    Raises:
        FormValidationError: With one message per offending field
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise FormValidationError(field_messages(e.errors())) from e


def _replace(rows: list, row: Any) -> list:
    return [row if existing.id == row.id else existing for existing in rows]


def _remove(rows: list, row_id: UUID) -> list:
    return [existing for existing in rows if existing.id != row_id]


class DataStore:
    """Lists of clients, orders, payments and (for admins) users."""
    
    def __init__(self, gateway: BackendGateway, session: SessionProvider):
        self.gateway = gateway
        self.session = session
        self.clients: List[ClientResponse] = []
        self.orders: List[OrderResponse] = []
        self.payments: List[PaymentResponse] = []
        self.users: List[UserResponse] = []
        self.loading = False
    
    async def refresh(self) -> bool:
        """
        Re-fetch everything visible to the signed-in user.
        
        Returns:
            False when skipped because another refresh is in flight
            
        Raises:
            AuthorizationError: If no identity has been resolved
            PersistenceError: If any fetch fails; lists keep their old contents
        """
        identity = self.session.identity
        if identity is None:
            raise AuthorizationError("Sign in before loading data")
        if self.loading:
            return False
        
        self.loading = True
        try:
            clients = await self.gateway.list_clients()
            orders = await self.gateway.list_orders()
            payments = await self.gateway.list_payments()
            users = await self.gateway.list_users() if identity.is_admin else []
        finally:
            self.loading = False
        
        self.clients, self.orders, self.payments, self.users = clients, orders, payments, users
        logger.info(
            "Data refreshed",
            extra={"clients": len(clients), "orders": len(orders), "payments": len(payments)},
        )
        return True
    
    # Clients
    
    async def add_client(self, data: Dict[str, Any]) -> ClientResponse:
        form = validate_form(ClientCreate, data)
        row = await self.gateway.create_client(form)
        self.clients = self.clients + [row]
        return row
    
    async def update_client(self, client_id: UUID, data: Dict[str, Any]) -> ClientResponse:
        form = validate_form(ClientUpdate, data)
        row = await self.gateway.update_client(client_id, form)
        self.clients = _replace(self.clients, row)
        return row
    
    async def delete_client(self, client_id: UUID) -> None:
        await self.gateway.delete_client(client_id)
        self.clients = _remove(self.clients, client_id)
    
    # Orders
    
    async def add_order(self, data: Dict[str, Any]) -> OrderResponse:
        form = validate_form(OrderCreate, data)
        row = await self.gateway.create_order(form)
        self.orders = self.orders + [row]
        return row
    
    async def update_order(self, order_id: UUID, data: Dict[str, Any]) -> OrderResponse:
        form = validate_form(OrderUpdate, data)
        row = await self.gateway.update_order(order_id, form)
        self.orders = _replace(self.orders, row)
        return row
    
    async def delete_order(self, order_id: UUID) -> None:
        await self.gateway.delete_order(order_id)
        self.orders = _remove(self.orders, order_id)
    
    # Payments
    
    async def add_payment(self, data: Dict[str, Any]) -> PaymentResponse:
        form = validate_form(PaymentCreate, data)
        row = await self.gateway.create_payment(form)
        self.payments = [row] + self.payments
        return row
    
    async def update_payment(self, payment_id: UUID, data: Dict[str, Any]) -> PaymentResponse:
        form = validate_form(PaymentUpdate, data)
        row = await self.gateway.update_payment(payment_id, form)
        self.payments = _replace(self.payments, row)
        return row
    
    async def delete_payment(self, payment_id: UUID) -> None:
        await self.gateway.delete_payment(payment_id)
        self.payments = _remove(self.payments, payment_id)
    
    # Derived values
    
    def get_order(self, order_id: UUID) -> Optional[OrderResponse]:
        return next((order for order in self.orders if order.id == order_id), None)
    
    def total_paid(self, order_id: UUID) -> Decimal:
        return balances.total_paid(order_id, self.payments)
    
    def outstanding(self, order_id: UUID) -> Decimal:
        order = self.get_order(order_id)
        if order is None:
            return balances.ZERO
        return balances.outstanding(order, self.payments)
    
    def user_name(self, user_id: UUID) -> str:
        return display_name(user_id, self.users)
