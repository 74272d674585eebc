"""
Payment model. Many payments may apply to one order.
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Date,
    Numeric,
    ForeignKey,
    CheckConstraint,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
import uuid
import enum

from ordertracker.db.base import Base, TimestampMixin


class PaymentMethod(str, enum.Enum):
    """Payment method enumeration."""
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    OTHER = "other"


class Payment(TimestampMixin, Base):
    """Payment received against an order."""
    
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    order_id = Column(Uuid, ForeignKey("orders.id"), nullable=False, index=True)
    client_id = Column(Uuid, ForeignKey("clients.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(
        SQLEnum(PaymentMethod, values_callable=lambda methods: [m.value for m in methods]),
        nullable=False,
        default=PaymentMethod.CASH,
    )
    reference_number = Column(String(100), nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    
    # Relationships
    order = relationship("Order", back_populates="payments")
    client = relationship("Client", back_populates="payments")
