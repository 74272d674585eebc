"""
API middleware for authentication.
Centralized identity resolution for all protected routes.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from ordertracker.core.config import settings
from ordertracker.core.security import decode_access_token
from ordertracker.db.session import get_db
from ordertracker.db.repositories.user_repository import UserRepository
from ordertracker.schemas.user import Identity

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_authentication(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """
    Resolve the bearer token to the caller's identity.
    
    Usage:
        @router.get("/endpoint")
        async def my_endpoint(
            identity: Identity = Depends(require_authentication)
        ):
            ...
    
    Returns:
        Identity of the signed-in user, with the role read from the database
        
    Raises:
        HTTPException: 401 if the token is invalid or the user is gone
    """
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid authentication token")
    
    user_id_str = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Token missing user ID")
    
    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise _unauthorized("Invalid user ID in token")
    
    user = await UserRepository(db).get(user_id)
    if not user:
        raise _unauthorized("User not found")
    
    return Identity(
        user_id=user.id,
        role=user.role,
        email=user.email,
        full_name=user.full_name,
    )


async def require_function_key(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> None:
    """
    Guard for remote functions: accepts the anonymous API key or any valid
    user token.
    """
    if credentials.credentials == settings.ANON_KEY:
        return
    if decode_access_token(credentials.credentials):
        return
    raise _unauthorized("Invalid API key")
