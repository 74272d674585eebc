"""
Authentication service: sign-up, sign-in and token issuing.
"""

from datetime import timedelta
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.core.config import settings
from ordertracker.core.exceptions import PersistenceError
from ordertracker.core.logging import get_logger
from ordertracker.core.security import create_access_token, hash_password, verify_password
from ordertracker.db.repositories.user_repository import UserRepository
from ordertracker.models.user import UserProfile, UserRole
from ordertracker.schemas.user import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from ordertracker.services.base_service import BaseService

logger = get_logger(__name__)


class AuthService(BaseService):
    """Service for authentication operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
    
    def _login_response(self, user: UserProfile) -> LoginResponse:
        token_data = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
        }
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        jwt_token = create_access_token(data=token_data, expires_delta=expires_delta)
        
        return LoginResponse(
            token=TokenResponse(
                access_token=jwt_token,
                token_type="bearer",
                expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            ),
            user=UserResponse.model_validate(user),
        )
    
    async def signup(self, data: SignupRequest) -> LoginResponse:
        """
        Create an account with the user role and sign it in.
        
        Raises:
            PersistenceError: If the email is already registered
        """
        if await self.user_repo.get_by_email(data.email):
            raise PersistenceError("Email is already registered")
        
        async with self.unit_of_work("create account"):
            user = await self.user_repo.create(
                email=data.email.lower(),
                full_name=data.full_name,
                role=UserRole.USER,
                password_hash=hash_password(data.password),
            )
        logger.info("Account created", extra={"user_id": str(user.id)})
        return self._login_response(user)
    
    async def login(self, data: LoginRequest) -> LoginResponse:
        """
        Verify email and password and issue a token.
        
        Raises:
            HTTPException: 401 on bad credentials
        """
        user = await self.user_repo.get_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return self._login_response(user)
    
    async def ensure_admin(self, email: str, password: str) -> None:
        """Create the initial admin account if it does not exist yet."""
        if await self.user_repo.get_by_email(email):
            return
        async with self.unit_of_work("create admin account"):
            await self.user_repo.create(
                email=email.lower(),
                full_name="Administrator",
                role=UserRole.ADMIN,
                password_hash=hash_password(password),
            )
        logger.info("Initial admin account created", extra={"email": email})
