"""
Payment controller.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.controllers.base_controller import BaseController
from ordertracker.services.payment_service import PaymentService
from ordertracker.schemas.payment import (
    PaymentCreate,
    PaymentUpdate,
    PaymentResponse,
    PaymentListResponse,
)
from ordertracker.schemas.user import Identity


class PaymentController(BaseController):
    """Controller for payment operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.payment_service = PaymentService(session, identity)
    
    async def create_payment(self, payment_data: PaymentCreate) -> PaymentResponse:
        """Record a payment."""
        return await self.payment_service.create_payment(payment_data)
    
    async def get_payment(self, payment_id: UUID) -> Optional[PaymentResponse]:
        """Get payment by ID."""
        return await self.payment_service.get_payment(payment_id)
    
    async def list_payments(
        self,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
    ) -> PaymentListResponse:
        """List payments with optional filters."""
        payments, total = await self.payment_service.list_payments(
            skip=skip,
            limit=limit,
            client_id=client_id,
            order_id=order_id,
        )
        return PaymentListResponse(items=payments, total=total)
    
    async def update_payment(
        self,
        payment_id: UUID,
        payment_data: PaymentUpdate,
    ) -> Optional[PaymentResponse]:
        """Update a payment."""
        return await self.payment_service.update_payment(payment_id, payment_data)
    
    async def delete_payment(self, payment_id: UUID) -> bool:
        """Delete a payment."""
        return await self.payment_service.delete_payment(payment_id)
