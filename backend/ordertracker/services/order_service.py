"""
Order service with business logic.
installation_date is derived here on every write; clients never send it.
"""

from datetime import date
from calendar import monthrange
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.core.exceptions import AuthorizationError, FormValidationError
from ordertracker.core.logging import get_logger
from ordertracker.services.base_service import BaseService
from ordertracker.db.repositories.client_repository import ClientRepository
from ordertracker.db.repositories.order_repository import OrderRepository
from ordertracker.schemas.order import (
    CalendarDay,
    CalendarResponse,
    InstallationDatePreview,
    OrderCreate,
    OrderUpdate,
    OrderResponse,
)
from ordertracker.schemas.user import Identity
from ordertracker.utils.scheduling import (
    compute_installation_date,
    filter_orders,
    lead_time_for_installation,
    orders_by_day,
)

logger = get_logger(__name__)


def preview_installation_date(
    order_date: date,
    lead_time_days: Optional[int] = None,
    installation_date: Optional[date] = None,
) -> InstallationDatePreview:
    """
    Live preview of the installation date while an order is being edited.
    
    When an installation day is picked (e.g. from the calendar) instead of
    a lead time, the lead time is derived from it.
    """
    if lead_time_days is None:
        if installation_date is None:
            raise FormValidationError({"lead_time_days": "Lead time or installation date is required"})
        lead_time_days = lead_time_for_installation(order_date, installation_date)
    return InstallationDatePreview(
        order_date=order_date,
        lead_time_days=lead_time_days,
        installation_date=compute_installation_date(order_date, lead_time_days),
    )


class OrderService(BaseService):
    """Service for order operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.session = session
        self.identity = identity
        self.order_repo = OrderRepository(session, identity)
        self.client_repo = ClientRepository(session, identity)
    
    async def _require_client(self, client_id: UUID) -> None:
        if await self.client_repo.get(client_id) is None:
            raise AuthorizationError(
                "Client not found or not accessible",
                details={"client_id": str(client_id)},
            )
    
    async def create_order(self, order_data: OrderCreate) -> OrderResponse:
        """Create an order for one of the caller's clients."""
        await self._require_client(order_data.client_id)
        
        values = order_data.model_dump()
        values["installation_date"] = compute_installation_date(
            order_data.order_date,
            order_data.lead_time_days,
        )
        async with self.unit_of_work("create order"):
            order = await self.order_repo.create(**values)
        
        logger.info(
            "Order created",
            extra={"order_id": str(order.id), "installation_date": str(order.installation_date)},
        )
        return OrderResponse.model_validate(order)
    
    async def get_order(self, order_id: UUID) -> Optional[OrderResponse]:
        """Get order by ID."""
        order = await self.order_repo.get(order_id)
        if not order:
            return None
        return OrderResponse.model_validate(order)
    
    async def list_orders(
        self,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        status: Optional[str] = None,
        client_id: Optional[UUID] = None,
    ) -> tuple[List[OrderResponse], int]:
        """List visible orders by installation date, with search and status filters."""
        orders = await self.order_repo.list_all(client_id=client_id)
        matches = filter_orders(orders, search=search, status=status)
        total = len(matches)
        page = matches[skip:skip + limit]
        return [OrderResponse.model_validate(order) for order in page], total
    
    async def update_order(
        self,
        order_id: UUID,
        order_data: OrderUpdate,
    ) -> Optional[OrderResponse]:
        """
        Update an order.
        
        Changing order_date or lead_time_days re-derives installation_date.
        Status changes are not restricted.
        """
        order = await self.order_repo.get(order_id)
        if not order:
            return None
        
        update_dict = order_data.model_dump(exclude_unset=True)
        if update_dict.get("client_id") and update_dict["client_id"] != order.client_id:
            await self._require_client(update_dict["client_id"])
        
        if "order_date" in update_dict or "lead_time_days" in update_dict:
            update_dict["installation_date"] = compute_installation_date(
                update_dict.get("order_date") or order.order_date,
                update_dict.get("lead_time_days") or order.lead_time_days,
            )
        
        async with self.unit_of_work("update order"):
            updated = await self.order_repo.update(order_id, **update_dict)
        return OrderResponse.model_validate(updated)
    
    async def delete_order(self, order_id: UUID) -> bool:
        """Delete an order. The backend refuses while payments still reference it."""
        async with self.unit_of_work("delete order"):
            deleted = await self.order_repo.delete(order_id)
        return deleted
    
    async def get_calendar(self, year: int, month: int) -> CalendarResponse:
        """Installations of one month grouped by day."""
        start = date(year, month, 1)
        end = date(year, month, monthrange(year, month)[1])
        orders = await self.order_repo.list_between(start, end)
        days = [
            CalendarDay(
                date=day,
                orders=[OrderResponse.model_validate(order) for order in day_orders],
            )
            for day, day_orders in orders_by_day(orders, year, month).items()
        ]
        return CalendarResponse(year=year, month=month, days=days)
