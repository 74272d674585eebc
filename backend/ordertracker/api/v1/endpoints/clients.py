"""
Client API endpoints.
"""

from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from ordertracker.api.v1.middleware import require_authentication
from ordertracker.db.session import get_db
from ordertracker.controllers.client_controller import ClientController
from ordertracker.schemas.client import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientListResponse,
    ClientDetailsResponse,
)
from ordertracker.schemas.user import Identity

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Client not found",
    )


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Create a new client."""
    controller = ClientController(db, identity)
    return await controller.create_client(client_data)


@router.get("", response_model=ClientListResponse)
async def list_clients(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> ClientListResponse:
    """List clients ordered by name."""
    controller = ClientController(db, identity)
    return await controller.list_clients(skip=skip, limit=limit)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: UUID,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Get client by ID."""
    controller = ClientController(db, identity)
    client = await controller.get_client(client_id)
    if not client:
        raise _not_found()
    return client


@router.get("/{client_id}/details", response_model=ClientDetailsResponse)
async def get_client_details(
    client_id: UUID,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> ClientDetailsResponse:
    """Client with orders, payment history and balances."""
    controller = ClientController(db, identity)
    details = await controller.get_client_details(client_id)
    if not details:
        raise _not_found()
    return details


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: UUID,
    client_data: ClientUpdate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Update a client."""
    controller = ClientController(db, identity)
    client = await controller.update_client(client_id, client_data)
    if not client:
        raise _not_found()
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: UUID,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
):
    """Delete a client."""
    controller = ClientController(db, identity)
    deleted = await controller.delete_client(client_id)
    if not deleted:
        raise _not_found()
