"""
Typed access to the REST API for client applications.
"""

from typing import List
from uuid import UUID

from ordertracker.core.config import settings
from ordertracker.core.integrations.http.http_client import HttpClient
from ordertracker.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from ordertracker.schemas.order import OrderCreate, OrderUpdate, OrderResponse
from ordertracker.schemas.payment import PaymentCreate, PaymentUpdate, PaymentResponse
from ordertracker.schemas.user import LoginRequest, LoginResponse, UserResponse

# Largest page the list endpoints accept
PAGE_SIZE = 1000


class BackendGateway:
    """
    Create/read/update/delete per entity over the REST API.
    
    The bearer token lives on the HttpClient and is set by SessionProvider.
    Any failure raises PersistenceError with the server's message.
    """
    
    def __init__(self, http_client: HttpClient, prefix: str = settings.API_V1_PREFIX):
        self.http = http_client
        self.prefix = prefix.rstrip("/")
    
    def _path(self, *parts: object) -> str:
        return "/".join([self.prefix, *(str(part) for part in parts)])
    
    async def _list_all(self, resource: str) -> list:
        """Fetch every row of a paginated list endpoint."""
        items: list = []
        skip = 0
        while True:
            page = await self.http.get(
                self._path(resource), params={"skip": skip, "limit": PAGE_SIZE}
            )
            items.extend(page["items"])
            skip += PAGE_SIZE
            if len(items) >= page["total"] or not page["items"]:
                return items
    
    # Session
    
    async def login(self, credentials: LoginRequest) -> LoginResponse:
        data = await self.http.post(self._path("auth", "login"), json=credentials.model_dump(mode="json"))
        return LoginResponse.model_validate(data)
    
    async def me(self) -> UserResponse:
        return UserResponse.model_validate(await self.http.get(self._path("auth", "me")))
    
    # Users
    
    async def list_users(self) -> List[UserResponse]:
        return [UserResponse.model_validate(item) for item in await self._list_all("users")]
    
    # Clients
    
    async def list_clients(self) -> List[ClientResponse]:
        return [ClientResponse.model_validate(item) for item in await self._list_all("clients")]
    
    async def create_client(self, data: ClientCreate) -> ClientResponse:
        row = await self.http.post(self._path("clients"), json=data.model_dump(mode="json"))
        return ClientResponse.model_validate(row)
    
    async def update_client(self, client_id: UUID, data: ClientUpdate) -> ClientResponse:
        row = await self.http.put(
            self._path("clients", client_id), json=data.model_dump(mode="json", exclude_unset=True)
        )
        return ClientResponse.model_validate(row)
    
    async def delete_client(self, client_id: UUID) -> None:
        await self.http.delete(self._path("clients", client_id))
    
    # Orders
    
    async def list_orders(self) -> List[OrderResponse]:
        return [OrderResponse.model_validate(item) for item in await self._list_all("orders")]
    
    async def create_order(self, data: OrderCreate) -> OrderResponse:
        row = await self.http.post(self._path("orders"), json=data.model_dump(mode="json"))
        return OrderResponse.model_validate(row)
    
    async def update_order(self, order_id: UUID, data: OrderUpdate) -> OrderResponse:
        row = await self.http.put(
            self._path("orders", order_id), json=data.model_dump(mode="json", exclude_unset=True)
        )
        return OrderResponse.model_validate(row)
    
    async def delete_order(self, order_id: UUID) -> None:
        await self.http.delete(self._path("orders", order_id))
    
    # Payments
    
    async def list_payments(self) -> List[PaymentResponse]:
        return [PaymentResponse.model_validate(item) for item in await self._list_all("payments")]
    
    async def create_payment(self, data: PaymentCreate) -> PaymentResponse:
        row = await self.http.post(self._path("payments"), json=data.model_dump(mode="json"))
        return PaymentResponse.model_validate(row)
    
    async def update_payment(self, payment_id: UUID, data: PaymentUpdate) -> PaymentResponse:
        row = await self.http.put(
            self._path("payments", payment_id), json=data.model_dump(mode="json", exclude_unset=True)
        )
        return PaymentResponse.model_validate(row)
    
    async def delete_payment(self, payment_id: UUID) -> None:
        await self.http.delete(self._path("payments", payment_id))
