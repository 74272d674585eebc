"""
User and settings API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from ordertracker.api.v1.middleware import require_authentication
from ordertracker.db.session import get_db
from ordertracker.services.user_service import UserService
from ordertracker.schemas.user import (
    Identity,
    PasswordChange,
    PasswordReset,
    RoleUpdate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)

router = APIRouter()


@router.get("", response_model=UserListResponse)
async def list_users(
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    """List all users (admin only)."""
    users = await UserService(db, identity).list_users()
    return UserListResponse(items=users, total=len(users))


@router.put("/me", response_model=UserResponse)
async def update_me(
    user_data: UserUpdate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Update the signed-in user's profile."""
    return await UserService(db, identity).update_me(user_data)


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    data: PasswordChange,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
):
    """Change the signed-in user's password."""
    await UserService(db, identity).change_password(data)


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    user_id: UUID,
    data: PasswordReset,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
):
    """Reset another user's password (admin only)."""
    if not await UserService(db, identity).reset_password(user_id, data):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )


@router.put("/{user_id}/role", response_model=UserResponse)
async def set_role(
    user_id: UUID,
    data: RoleUpdate,
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Change a user's role (admin only)."""
    user = await UserService(db, identity).set_role(user_id, data)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user
