"""
Database initialization and bootstrapping.
Creates tables and seeds the first administrator.
"""

from ordertracker.db.base import Base
from ordertracker.db import session as db_session
from ordertracker.core.config import settings
from ordertracker.core.logging import get_logger

logger = get_logger(__name__)


async def create_tables() -> None:
    """
    Create all database tables that do not exist yet.
    """
    # Register every mapped class with Base.metadata
    import ordertracker.models  # noqa: F401
    
    if db_session.engine is None:
        db_session.create_engine()
    
    async with db_session.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    logger.info("Database tables initialized")


async def seed_initial_data() -> None:
    """
    Seed the administrator account from ADMIN_EMAIL / ADMIN_PASSWORD.
    Skipped when ADMIN_EMAIL is empty.
    """
    if not settings.ADMIN_EMAIL:
        logger.info("Initial data seeding skipped")
        return
    
    from ordertracker.services.auth_service import AuthService
    
    if db_session.async_session_maker is None:
        db_session.create_sessionmaker()
    
    async with db_session.async_session_maker() as session:
        await AuthService(session).ensure_admin(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    
    logger.info("Initial data seeded", extra={"admin_email": settings.ADMIN_EMAIL})
