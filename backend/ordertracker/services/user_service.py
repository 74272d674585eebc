"""
User service: profiles, passwords and roles.
"""

from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.core.exceptions import AuthorizationError, FormValidationError
from ordertracker.core.logging import get_logger
from ordertracker.core.security import hash_password, verify_password
from ordertracker.db.repositories.user_repository import UserRepository
from ordertracker.models.user import UserProfile
from ordertracker.schemas.user import (
    Identity,
    PasswordChange,
    PasswordReset,
    RoleUpdate,
    UserResponse,
    UserUpdate,
)
from ordertracker.services.base_service import BaseService

logger = get_logger(__name__)


def display_name(user_id: UUID, users: Iterable[UserProfile]) -> str:
    """Full name of a user, or a shortened id when the name is unknown."""
    for user in users:
        if user.id == user_id and user.full_name:
            return user.full_name
    return str(user_id)[:8] + "..."


class UserService(BaseService):
    """Service for user profile operations."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.session = session
        self.identity = identity
        self.user_repo = UserRepository(session)
    
    def _require_admin(self) -> None:
        if not self.identity.is_admin:
            raise AuthorizationError("Admin privileges required")
    
    async def get_me(self) -> Optional[UserResponse]:
        """Profile of the caller."""
        user = await self.user_repo.get(self.identity.user_id)
        if not user:
            return None
        return UserResponse.model_validate(user)
    
    async def list_users(self) -> List[UserResponse]:
        """All users, admin only."""
        self._require_admin()
        users = await self.user_repo.list_ordered()
        return [UserResponse.model_validate(user) for user in users]
    
    async def update_me(self, user_data: UserUpdate) -> UserResponse:
        """Update the caller's own profile."""
        async with self.unit_of_work("update profile"):
            user = await self.user_repo.update(
                self.identity.user_id,
                **user_data.model_dump(exclude_unset=True),
            )
        await self.session.refresh(user)
        return UserResponse.model_validate(user)
    
    async def change_password(self, data: PasswordChange) -> None:
        """Change the caller's password after checking the current one."""
        user = await self.user_repo.get(self.identity.user_id)
        if not user or not verify_password(data.current_password, user.password_hash):
            raise FormValidationError({"current_password": "Current password is incorrect"})
        
        async with self.unit_of_work("change password"):
            await self.user_repo.update(user.id, password_hash=hash_password(data.new_password))
        logger.info("Password changed", extra={"user_id": str(user.id)})
    
    async def reset_password(self, user_id: UUID, data: PasswordReset) -> bool:
        """Set another user's password, admin only."""
        self._require_admin()
        if not await self.user_repo.get(user_id):
            return False
        
        async with self.unit_of_work("reset password"):
            await self.user_repo.update(user_id, password_hash=hash_password(data.new_password))
        logger.info(
            "Password reset by admin",
            extra={"user_id": str(user_id), "admin_id": str(self.identity.user_id)},
        )
        return True
    
    async def set_role(self, user_id: UUID, data: RoleUpdate) -> Optional[UserResponse]:
        """Change a user's role, admin only."""
        self._require_admin()
        if not await self.user_repo.get(user_id):
            return None
        
        async with self.unit_of_work("change role"):
            user = await self.user_repo.update(user_id, role=data.role)
        await self.session.refresh(user)
        return UserResponse.model_validate(user)
