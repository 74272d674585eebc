"""
Payment Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from ordertracker.models.payment import PaymentMethod


class PaymentBase(BaseModel):
    """Base payment schema with common fields."""
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount must be greater than 0")
    payment_date: date = Field(default_factory=date.today)
    payment_method: PaymentMethod = PaymentMethod.CASH
    reference_number: str = Field("", max_length=100)
    notes: str = ""


class PaymentCreate(PaymentBase):
    """Schema for recording a payment against an order."""
    order_id: UUID
    client_id: UUID


class PaymentUpdate(BaseModel):
    """Schema for updating a payment (all fields optional)."""
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    payment_date: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value):
        """Fields may be omitted but not cleared."""
        if value is None:
            raise ValueError("Field cannot be empty")
        return value


class PaymentResponse(PaymentBase):
    """Schema for payment response."""
    id: UUID
    user_id: UUID
    order_id: UUID
    client_id: UUID
    amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentListResponse(BaseModel):
    """Schema for payment list response."""
    items: List[PaymentResponse]
    total: int
