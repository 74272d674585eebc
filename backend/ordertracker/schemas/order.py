"""
Order Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from ordertracker.models.order import OrderStatus


class ClientInfo(BaseModel):
    """Embedded client info for order responses."""
    id: UUID
    name: str
    email: str
    phone: str
    address: str

    class Config:
        from_attributes = True


class OrderBase(BaseModel):
    """Base order schema with common fields."""
    title: str = Field(..., min_length=1, max_length=255, description="Title is required")
    description: str = Field(..., min_length=1, description="Description is required")
    client_id: UUID = Field(..., description="Client is required")
    status: OrderStatus = OrderStatus.PENDING
    order_date: date
    lead_time_days: int = Field(14, ge=1, description="Lead time must be at least 1 day")
    notes: str = ""

    class Config:
        str_strip_whitespace = True


class OrderCreate(OrderBase):
    """
    Schema for creating an order.
    installation_date is derived from order_date and lead_time_days.
    """
    order_date: date = Field(default_factory=date.today)
    total_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount must be greater than 0")


class OrderUpdate(BaseModel):
    """Schema for updating an order (all fields optional)."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    client_id: Optional[UUID] = None
    status: Optional[OrderStatus] = None
    order_date: Optional[date] = None
    lead_time_days: Optional[int] = Field(None, ge=1)
    total_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    notes: Optional[str] = None
    reminder_sent: Optional[bool] = None

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value):
        """Fields may be omitted but not cleared."""
        if value is None:
            raise ValueError("Field cannot be empty")
        return value

    class Config:
        str_strip_whitespace = True


class OrderResponse(OrderBase):
    """Schema for order response."""
    id: UUID
    user_id: UUID
    installation_date: date
    total_amount: Decimal
    reminder_sent: bool = False
    client: Optional[ClientInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderBalanceResponse(OrderResponse):
    """Order with its payment position."""
    total_paid: Decimal
    outstanding: Decimal
    overpaid: bool = False


class OrderListResponse(BaseModel):
    """Schema for order list response."""
    items: List[OrderResponse]
    total: int


class CalendarDay(BaseModel):
    """Installations scheduled on one day."""
    date: date
    orders: List[OrderResponse]


class CalendarResponse(BaseModel):
    """A month of installations grouped by day."""
    year: int
    month: int
    days: List[CalendarDay]


class InstallationDatePreview(BaseModel):
    """Derived installation date for a prospective order."""
    order_date: date
    lead_time_days: int
    installation_date: date
