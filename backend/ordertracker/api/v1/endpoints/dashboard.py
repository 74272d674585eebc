"""
Dashboard API endpoint.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.api.v1.middleware import require_authentication
from ordertracker.db.session import get_db
from ordertracker.controllers.dashboard_controller import DashboardController
from ordertracker.schemas.dashboard import DashboardResponse
from ordertracker.schemas.user import Identity

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    today: Optional[date] = Query(None, description="Reference day; defaults to the current date"),
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Financial overview scoped to the caller."""
    controller = DashboardController(db, identity)
    return await controller.get_dashboard(today)
