"""
Order model for installation jobs.
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Date,
    Integer,
    Numeric,
    Boolean,
    ForeignKey,
    CheckConstraint,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
import uuid
import enum

from ordertracker.db.base import Base, TimestampMixin


class OrderStatus(str, enum.Enum):
    """Order status tag. Any transition is allowed."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


CLOSED_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


class Order(TimestampMixin, Base):
    """Order model; installation_date is always order_date + lead_time_days."""
    
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("lead_time_days >= 1", name="ck_orders_lead_time_positive"),
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
    )
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(Uuid, ForeignKey("clients.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(
        SQLEnum(OrderStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    order_date = Column(Date, nullable=False)
    installation_date = Column(Date, nullable=False, index=True)
    lead_time_days = Column(Integer, nullable=False, default=14)
    total_amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text, nullable=False, default="")
    reminder_sent = Column(Boolean, nullable=False, default=False)
    
    # Relationships
    owner = relationship("UserProfile", back_populates="orders")
    client = relationship("Client", back_populates="orders")
    payments = relationship("Payment", back_populates="order")
