"""
Client model for customer management.
"""

from sqlalchemy import Column, String, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid

from ordertracker.db.base import Base, TimestampMixin


class Client(TimestampMixin, Base):
    """Customer record, owned by the user who created it."""
    
    __tablename__ = "clients"
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    address = Column(Text, nullable=False)
    
    # Relationships
    owner = relationship("UserProfile", back_populates="clients")
    orders = relationship("Order", back_populates="client")
    payments = relationship("Payment", back_populates="client")
