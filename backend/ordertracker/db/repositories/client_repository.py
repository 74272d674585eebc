"""
Client repository for database operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from ordertracker.db.repositories.base_repository import OwnedRepository
from ordertracker.models.client import Client
from ordertracker.schemas.user import Identity


class ClientRepository(OwnedRepository[Client]):
    """Repository for client operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        super().__init__(Client, session, identity)
    
    def order(self, query: Select) -> Select:
        """Clients are listed by name."""
        return query.order_by(Client.name)
