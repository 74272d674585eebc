"""
Health service.
Provides health check functionality.
"""

import time

from ordertracker.db import session as db_session
from ordertracker.db.repositories.health_repository import HealthRepository
from ordertracker.schemas.health import HealthResponse


class HealthService:
    """Service for health check operations."""
    
    def __init__(self):
        self.start_time = time.time()
    
    async def get_health(self) -> HealthResponse:
        """
        Get system health status.
        
        Returns:
            HealthResponse with status, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)
        uptime_str = f"PT{uptime_seconds}S"  # ISO 8601 duration
        
        checks = {}
        
        try:
            if db_session.async_session_maker is None:
                db_session.create_sessionmaker()
            async with db_session.async_session_maker() as session:
                repo = HealthRepository(session=session)
                db_status = await repo.check_database()
                checks["database"] = "ok" if db_status else "error"
        except Exception as e:
            checks["database"] = f"error: {str(e)}"
        
        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"
        
        return HealthResponse(
            status=status,
            uptime=uptime_str,
            checks=checks,
        )
