"""
Client service with business logic.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.services.base_service import BaseService
from ordertracker.db.repositories.client_repository import ClientRepository
from ordertracker.db.repositories.order_repository import OrderRepository
from ordertracker.db.repositories.payment_repository import PaymentRepository
from ordertracker.schemas.client import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientDetailsResponse,
)
from ordertracker.schemas.order import OrderBalanceResponse, OrderResponse
from ordertracker.schemas.payment import PaymentResponse
from ordertracker.schemas.user import Identity
from ordertracker.utils.balances import ZERO, order_balances


class ClientService(BaseService):
    """Service for client operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.session = session
        self.identity = identity
        self.client_repo = ClientRepository(session, identity)
        self.order_repo = OrderRepository(session, identity)
        self.payment_repo = PaymentRepository(session, identity)
    
    async def create_client(self, client_data: ClientCreate) -> ClientResponse:
        """Create a new client owned by the caller."""
        async with self.unit_of_work("create client"):
            client = await self.client_repo.create(**client_data.model_dump())
        return ClientResponse.model_validate(client)
    
    async def get_client(self, client_id: UUID) -> Optional[ClientResponse]:
        """Get client by ID."""
        client = await self.client_repo.get(client_id)
        if not client:
            return None
        return ClientResponse.model_validate(client)
    
    async def list_clients(
        self,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[List[ClientResponse], int]:
        """List visible clients ordered by name."""
        clients = await self.client_repo.list(skip=skip, limit=limit)
        total = await self.client_repo.count()
        return [ClientResponse.model_validate(client) for client in clients], total
    
    async def update_client(
        self,
        client_id: UUID,
        client_data: ClientUpdate,
    ) -> Optional[ClientResponse]:
        """Update a client."""
        async with self.unit_of_work("update client"):
            updated = await self.client_repo.update(
                client_id,
                **client_data.model_dump(exclude_unset=True),
            )
        if not updated:
            return None
        return ClientResponse.model_validate(updated)
    
    async def delete_client(self, client_id: UUID) -> bool:
        """Delete a client. The backend refuses while orders still reference it."""
        async with self.unit_of_work("delete client"):
            deleted = await self.client_repo.delete(client_id)
        return deleted
    
    async def get_client_details(self, client_id: UUID) -> Optional[ClientDetailsResponse]:
        """Client with its orders, their payments and balances."""
        client = await self.client_repo.get(client_id)
        if not client:
            return None
        
        orders = await self.order_repo.list_by_client(client_id)
        payments = await self.payment_repo.list_for_orders(order.id for order in orders)
        balances = order_balances(orders, payments)
        
        order_rows = [
            OrderBalanceResponse(
                **OrderResponse.model_validate(row.order).model_dump(),
                total_paid=row.total_paid,
                outstanding=row.outstanding,
                overpaid=row.overpaid,
            )
            for row in balances
        ]
        return ClientDetailsResponse(
            client=ClientResponse.model_validate(client),
            orders=order_rows,
            payments=[PaymentResponse.model_validate(p) for p in payments],
            total_paid=sum((row.total_paid for row in balances), ZERO),
            total_outstanding=sum((row.outstanding for row in balances), ZERO),
        )
