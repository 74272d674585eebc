"""
Order repository for database operations.
Order reads always join the client for display.
"""

from datetime import date
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.orm import joinedload
from sqlalchemy.sql import Select

from ordertracker.db.repositories.base_repository import OwnedRepository
from ordertracker.models.order import Order, OrderStatus, CLOSED_STATUSES
from ordertracker.schemas.user import Identity


class OrderRepository(OwnedRepository[Order]):
    """Repository for order operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        super().__init__(Order, session, identity)
    
    def base_query(self) -> Select:
        return self.scope(select(Order).options(joinedload(Order.client)))
    
    def order(self, query: Select) -> Select:
        """Orders are listed by installation date."""
        return query.order_by(Order.installation_date, Order.created_at)
    
    async def list_all(self, **filters) -> List[Order]:
        """Every visible order, without pagination (dashboard and calendar input)."""
        return await self.list(skip=0, limit=None, **filters)
    
    async def list_by_client(self, client_id: UUID) -> List[Order]:
        """Visible orders of one client."""
        return await self.list_all(client_id=client_id)
    
    async def list_between(self, start: date, end: date) -> List[Order]:
        """Visible orders installing between start and end, inclusive."""
        query = self.order(
            self.base_query()
            .where(Order.installation_date >= start)
            .where(Order.installation_date <= end)
        )
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())


class ReminderOrderRepository:
    """
    Unscoped order access for the reminder function, which runs with the
    service key rather than a user identity.
    """
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def list_due(self, installation_date: date) -> List[Order]:
        """Open orders installing on installation_date that have not been reminded."""
        query = (
            select(Order)
            .options(joinedload(Order.client))
            .where(Order.installation_date == installation_date)
            .where(Order.reminder_sent.is_(False))
            .where(Order.status.notin_(list(CLOSED_STATUSES)))
            .order_by(Order.created_at)
        )
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())
    
    async def mark_reminded(self, order_id: UUID) -> None:
        """Flag an order's reminder as sent."""
        await self.session.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(reminder_sent=True)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
