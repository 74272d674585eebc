"""
User, identity and authentication schemas.
"""

from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional
from uuid import UUID

from ordertracker.core.config import settings
from ordertracker.models.user import UserRole


class Identity(BaseModel):
    """Authenticated caller, passed explicitly to every scoped query."""
    user_id: UUID
    role: UserRole = UserRole.USER
    email: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserResponse(BaseModel):
    """Public user profile."""
    id: UUID
    email: str
    full_name: Optional[str] = None
    role: UserRole

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    """Schema for user list response."""
    items: list[UserResponse]
    total: int


class UserUpdate(BaseModel):
    """Profile fields a user may change on their own account."""
    full_name: str = Field(..., min_length=1, max_length=255)


class RoleUpdate(BaseModel):
    """Admin change of a user's role."""
    role: UserRole


class SignupRequest(BaseModel):
    """Self-service account creation. New accounts get the user role."""
    email: EmailStr
    password: str = Field(..., min_length=settings.MIN_PASSWORD_LENGTH)
    full_name: Optional[str] = Field(None, max_length=255)


class LoginRequest(BaseModel):
    """Email/password sign-in."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordChange(BaseModel):
    """Change of the caller's own password."""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=settings.MIN_PASSWORD_LENGTH)
    confirm_password: str

    @model_validator(mode='after')
    def passwords_match(self) -> 'PasswordChange':
        if self.new_password != self.confirm_password:
            raise ValueError('New passwords do not match')
        return self


class PasswordReset(BaseModel):
    """Admin reset of another user's password."""
    new_password: str = Field(..., min_length=settings.MIN_PASSWORD_LENGTH)
    confirm_password: str

    @model_validator(mode='after')
    def passwords_match(self) -> 'PasswordReset':
        if self.new_password != self.confirm_password:
            raise ValueError('Passwords do not match')
        return self


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginResponse(BaseModel):
    """Login response with token and user profile."""
    token: TokenResponse
    user: UserResponse
