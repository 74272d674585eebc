"""
Client Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID


class ClientBase(BaseModel):
    """Base client schema with common fields."""
    name: str = Field(..., min_length=1, max_length=255, description="Name is required")
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50, description="Phone is required")
    address: str = Field(..., min_length=1, description="Address is required")


class ClientCreate(ClientBase):
    """Schema for creating a client."""
    pass


class ClientUpdate(BaseModel):
    """Schema for updating a client (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = Field(None, min_length=1)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value):
        """Fields may be omitted but not cleared."""
        if value is None:
            raise ValueError("Field cannot be empty")
        return value


class ClientResponse(ClientBase):
    """Schema for client response."""
    id: UUID
    user_id: UUID
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClientListResponse(BaseModel):
    """Schema for client list response."""
    items: List[ClientResponse]
    total: int


class ClientDetailsResponse(BaseModel):
    """Client with its orders, payment history and per-order balances."""
    client: ClientResponse
    orders: List["OrderBalanceResponse"]
    payments: List["PaymentResponse"]
    total_paid: Decimal
    total_outstanding: Decimal


# Resolve forward references
from ordertracker.schemas.order import OrderBalanceResponse
from ordertracker.schemas.payment import PaymentResponse
ClientDetailsResponse.model_rebuild()
