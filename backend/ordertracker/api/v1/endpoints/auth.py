"""
Authentication API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.api.v1.middleware import require_authentication
from ordertracker.core.rate_limit import DEFAULT_LIMIT, limiter
from ordertracker.db.session import get_db
from ordertracker.services.auth_service import AuthService
from ordertracker.services.user_service import UserService
from ordertracker.schemas.user import (
    Identity,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserResponse,
)

router = APIRouter()


@router.post("/signup", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(DEFAULT_LIMIT)
async def signup(
    request: Request,
    data: SignupRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Create an account and sign it in."""
    return await AuthService(db).signup(data)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(DEFAULT_LIMIT)
async def login(
    request: Request,
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Sign in with email and password."""
    return await AuthService(db).login(data)


@router.get("/me", response_model=UserResponse)
async def me(
    identity: Identity = Depends(require_authentication),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Profile of the signed-in user."""
    user = await UserService(db, identity).get_me()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user
