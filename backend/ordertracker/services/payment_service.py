"""
Payment service with business logic.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.core.exceptions import AuthorizationError, PersistenceError
from ordertracker.core.logging import get_logger
from ordertracker.services.base_service import BaseService
from ordertracker.db.repositories.order_repository import OrderRepository
from ordertracker.db.repositories.payment_repository import PaymentRepository
from ordertracker.models.order import Order
from ordertracker.schemas.payment import (
    PaymentCreate,
    PaymentUpdate,
    PaymentResponse,
)
from ordertracker.schemas.user import Identity
from ordertracker.utils.balances import is_overpaid, total_paid

logger = get_logger(__name__)


class PaymentService(BaseService):
    """Service for payment operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.session = session
        self.identity = identity
        self.payment_repo = PaymentRepository(session, identity)
        self.order_repo = OrderRepository(session, identity)
    
    async def _require_order(self, order_id: UUID) -> Order:
        order = await self.order_repo.get(order_id)
        if order is None:
            raise AuthorizationError(
                "Order not found or not accessible",
                details={"order_id": str(order_id)},
            )
        return order
    
    async def _warn_if_overpaid(self, order: Order) -> None:
        payments = await self.payment_repo.list_for_orders([order.id])
        if is_overpaid(order, payments):
            logger.warning(
                "Payments exceed order total",
                extra={
                    "order_id": str(order.id),
                    "total_amount": str(order.total_amount),
                    "total_paid": str(total_paid(order.id, payments)),
                },
            )
    
    async def create_payment(self, payment_data: PaymentCreate) -> PaymentResponse:
        """Record a payment against one of the caller's orders."""
        order = await self._require_order(payment_data.order_id)
        if order.client_id != payment_data.client_id:
            raise PersistenceError(
                "Payment client does not match the order's client",
                status_code=400,
                details={"order_id": str(order.id), "client_id": str(payment_data.client_id)},
            )
        
        async with self.unit_of_work("record payment"):
            payment = await self.payment_repo.create(**payment_data.model_dump())
        
        await self._warn_if_overpaid(order)
        return PaymentResponse.model_validate(payment)
    
    async def get_payment(self, payment_id: UUID) -> Optional[PaymentResponse]:
        """Get payment by ID."""
        payment = await self.payment_repo.get(payment_id)
        if not payment:
            return None
        return PaymentResponse.model_validate(payment)
    
    async def list_payments(
        self,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
    ) -> tuple[List[PaymentResponse], int]:
        """List visible payments, newest first."""
        payments = await self.payment_repo.list(
            skip=skip,
            limit=limit,
            client_id=client_id,
            order_id=order_id,
        )
        total = await self.payment_repo.count(client_id=client_id, order_id=order_id)
        return [PaymentResponse.model_validate(p) for p in payments], total
    
    async def update_payment(
        self,
        payment_id: UUID,
        payment_data: PaymentUpdate,
    ) -> Optional[PaymentResponse]:
        """Update a payment; the order it belongs to cannot change."""
        payment = await self.payment_repo.get(payment_id)
        if not payment:
            return None
        order = await self._require_order(payment.order_id)
        
        async with self.unit_of_work("update payment"):
            updated = await self.payment_repo.update(
                payment_id,
                **payment_data.model_dump(exclude_unset=True),
            )
        
        await self._warn_if_overpaid(order)
        return PaymentResponse.model_validate(updated)
    
    async def delete_payment(self, payment_id: UUID) -> bool:
        """Delete a payment."""
        async with self.unit_of_work("delete payment"):
            deleted = await self.payment_repo.delete(payment_id)
        return deleted
