"""
User repository for database operations.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from ordertracker.db.repositories.base_repository import BaseRepository
from ordertracker.models.user import UserProfile


class UserRepository(BaseRepository[UserProfile]):
    """Repository for user operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(UserProfile, session)
    
    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        """Get user by email (case-insensitive)."""
        result = await self.session.execute(
            select(UserProfile).where(func.lower(UserProfile.email) == email.lower())
        )
        return result.scalar_one_or_none()
    
    async def list_ordered(self) -> List[UserProfile]:
        """All users ordered by full name."""
        result = await self.session.execute(
            select(UserProfile).order_by(UserProfile.full_name, UserProfile.email)
        )
        return list(result.scalars().all())
