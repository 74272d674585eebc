"""
Client controller.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.controllers.base_controller import BaseController
from ordertracker.services.client_service import ClientService
from ordertracker.schemas.client import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientListResponse,
    ClientDetailsResponse,
)
from ordertracker.schemas.user import Identity


class ClientController(BaseController):
    """Controller for client operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.client_service = ClientService(session, identity)
    
    async def create_client(self, client_data: ClientCreate) -> ClientResponse:
        """Create a new client."""
        return await self.client_service.create_client(client_data)
    
    async def get_client(self, client_id: UUID) -> Optional[ClientResponse]:
        """Get client by ID."""
        return await self.client_service.get_client(client_id)
    
    async def get_client_details(self, client_id: UUID) -> Optional[ClientDetailsResponse]:
        """Get client with orders, payments and balances."""
        return await self.client_service.get_client_details(client_id)
    
    async def list_clients(self, skip: int = 0, limit: int = 100) -> ClientListResponse:
        """List clients."""
        clients, total = await self.client_service.list_clients(skip=skip, limit=limit)
        return ClientListResponse(items=clients, total=total)
    
    async def update_client(
        self,
        client_id: UUID,
        client_data: ClientUpdate,
    ) -> Optional[ClientResponse]:
        """Update a client."""
        return await self.client_service.update_client(client_id, client_data)
    
    async def delete_client(self, client_id: UUID) -> bool:
        """Delete a client."""
        return await self.client_service.delete_client(client_id)
