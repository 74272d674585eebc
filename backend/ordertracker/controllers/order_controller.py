"""
Order controller.
"""

from datetime import date
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.controllers.base_controller import BaseController
from ordertracker.services.order_service import OrderService, preview_installation_date
from ordertracker.schemas.order import (
    CalendarResponse,
    InstallationDatePreview,
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    OrderListResponse,
)
from ordertracker.schemas.user import Identity


class OrderController(BaseController):
    """Controller for order operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.order_service = OrderService(session, identity)
    
    async def create_order(self, order_data: OrderCreate) -> OrderResponse:
        """Create a new order."""
        return await self.order_service.create_order(order_data)
    
    async def get_order(self, order_id: UUID) -> Optional[OrderResponse]:
        """Get order by ID."""
        return await self.order_service.get_order(order_id)
    
    async def list_orders(
        self,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        status: Optional[str] = None,
        client_id: Optional[UUID] = None,
    ) -> OrderListResponse:
        """List orders with optional filters."""
        orders, total = await self.order_service.list_orders(
            skip=skip,
            limit=limit,
            search=search,
            status=status,
            client_id=client_id,
        )
        return OrderListResponse(items=orders, total=total)
    
    async def update_order(
        self,
        order_id: UUID,
        order_data: OrderUpdate,
    ) -> Optional[OrderResponse]:
        """Update an order."""
        return await self.order_service.update_order(order_id, order_data)
    
    async def delete_order(self, order_id: UUID) -> bool:
        """Delete an order."""
        return await self.order_service.delete_order(order_id)
    
    async def get_calendar(self, year: int, month: int) -> CalendarResponse:
        """Installations of one month."""
        return await self.order_service.get_calendar(year, month)
    
    def preview_installation_date(
        self,
        order_date: date,
        lead_time_days: Optional[int] = None,
        installation_date: Optional[date] = None,
    ) -> InstallationDatePreview:
        """Derived installation date (or lead time) for a prospective order."""
        return preview_installation_date(order_date, lead_time_days, installation_date)
