"""
Dashboard controller.
"""

from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.controllers.base_controller import BaseController
from ordertracker.services.dashboard_service import DashboardService
from ordertracker.schemas.dashboard import DashboardResponse
from ordertracker.schemas.user import Identity


class DashboardController(BaseController):
    """Controller for the dashboard."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.dashboard_service = DashboardService(session, identity)
    
    async def get_dashboard(self, today: Optional[date] = None) -> DashboardResponse:
        """Financial overview for the caller."""
        return await self.dashboard_service.get_dashboard(today)
