"""
Payment API endpoints.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from ordertracker.api.v1.middleware import require_authentication
from ordertracker.db.session import get_db
from ordertracker.controllers.payment_controller import PaymentController
from ordertracker.schemas.payment import (
    PaymentCreate,
    PaymentUpdate,
    PaymentResponse,
    PaymentListResponse,
)
from ordertracker.schemas.user import Identity

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Payment not found",
    )


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> PaymentResponse:
    """Record a payment against an order."""
    controller = PaymentController(db, identity)
    return await controller.create_payment(payment_data)


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    client_id: Optional[UUID] = Query(None),
    order_id: Optional[UUID] = Query(None),
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> PaymentListResponse:
    """List payments, newest first."""
    controller = PaymentController(db, identity)
    return await controller.list_payments(
        skip=skip,
        limit=limit,
        client_id=client_id,
        order_id=order_id,
    )


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: UUID,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> PaymentResponse:
    """Get payment by ID."""
    controller = PaymentController(db, identity)
    payment = await controller.get_payment(payment_id)
    if not payment:
        raise _not_found()
    return payment


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: UUID,
    payment_data: PaymentUpdate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> PaymentResponse:
    """Update a payment."""
    controller = PaymentController(db, identity)
    payment = await controller.update_payment(payment_id, payment_data)
    if not payment:
        raise _not_found()
    return payment


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: UUID,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
):
    """Delete a payment."""
    controller = PaymentController(db, identity)
    deleted = await controller.delete_payment(payment_id)
    if not deleted:
        raise _not_found()
