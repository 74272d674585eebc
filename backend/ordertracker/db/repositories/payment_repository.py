"""
Payment repository for database operations.
"""

from typing import Iterable, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.sql import Select

from ordertracker.db.repositories.base_repository import OwnedRepository
from ordertracker.models.order import Order
from ordertracker.models.payment import Payment
from ordertracker.schemas.user import Identity


class PaymentRepository(OwnedRepository[Payment]):
    """
    Repository for payment operations.
    
    A payment is visible to whoever can see its order, so a payment recorded
    by an admin on a user's order shows up in that user's lists.
    """
    
    def __init__(self, session: AsyncSession, identity: Identity):
        super().__init__(Payment, session, identity)
    
    def scope(self, query: Select) -> Select:
        """Restrict a select to payments on orders the identity owns."""
        if self.identity.is_admin:
            return query
        owned_orders = select(Order.id).where(Order.user_id == self.identity.user_id)
        return query.where(Payment.order_id.in_(owned_orders))
    
    def order(self, query: Select) -> Select:
        """Newest payments first."""
        return query.order_by(Payment.payment_date.desc(), Payment.created_at.desc())
    
    async def list_by_client(self, client_id: UUID) -> List[Payment]:
        """Visible payments of one client."""
        return await self.list(skip=0, limit=None, client_id=client_id)
    
    async def list_by_order(self, order_id: UUID) -> List[Payment]:
        """Visible payments recorded against one order."""
        return await self.list(skip=0, limit=None, order_id=order_id)
    
    async def list_for_orders(self, order_ids: Iterable[UUID]) -> List[Payment]:
        """
        Visible payments recorded against the given orders, whoever recorded
        them.
        """
        ids = list(order_ids)
        if not ids:
            return []
        query = self.order(self.base_query().where(Payment.order_id.in_(ids)))
        result = await self.session.execute(query)
        return list(result.scalars().all())
