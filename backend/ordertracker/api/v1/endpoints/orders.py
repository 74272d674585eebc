"""
Order API endpoints.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from ordertracker.api.v1.middleware import require_authentication
from ordertracker.db.session import get_db
from ordertracker.controllers.order_controller import OrderController
from ordertracker.models.order import OrderStatus
from ordertracker.schemas.order import (
    CalendarResponse,
    InstallationDatePreview,
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    OrderListResponse,
)
from ordertracker.schemas.user import Identity

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Order not found",
    )


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    """Create a new order; installation_date is derived."""
    controller = OrderController(db, identity)
    return await controller.create_order(order_data)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    search: Optional[str] = Query(None),
    status: Optional[OrderStatus] = Query(None),
    client_id: Optional[UUID] = Query(None),
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> OrderListResponse:
    """List orders by installation date with optional filters."""
    controller = OrderController(db, identity)
    return await controller.list_orders(
        skip=skip,
        limit=limit,
        search=search,
        status=status.value if status else None,
        client_id=client_id,
    )


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> CalendarResponse:
    """Installations of one month grouped by day."""
    controller = OrderController(db, identity)
    return await controller.get_calendar(year, month)


@router.get("/installation-date", response_model=InstallationDatePreview)
async def preview_installation_date(
    order_date: date = Query(...),
    lead_time_days: Optional[int] = Query(None, ge=1),
    installation_date: Optional[date] = Query(None),
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> InstallationDatePreview:
    """Installation date an order would get, or the lead time for a picked installation day."""
    controller = OrderController(db, identity)
    return controller.preview_installation_date(order_date, lead_time_days, installation_date)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    """Get order by ID."""
    controller = OrderController(db, identity)
    order = await controller.get_order(order_id)
    if not order:
        raise _not_found()
    return order


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: UUID,
    order_data: OrderUpdate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    """Update an order."""
    controller = OrderController(db, identity)
    order = await controller.update_order(order_id, order_data)
    if not order:
        raise _not_found()
    return order


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: UUID,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
):
    """Delete an order."""
    controller = OrderController(db, identity)
    deleted = await controller.delete_order(order_id)
    if not deleted:
        raise _not_found()
