"""
User profile model. The role decides row visibility.
"""

from sqlalchemy import Column, String, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from ordertracker.db.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class UserProfile(TimestampMixin, Base):
    """Signed-in identity of the back office."""
    
    __tablename__ = "users"
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    role = Column(
        SQLEnum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.USER,
    )
    password_hash = Column(String(255), nullable=True)
    
    # Relationships
    clients = relationship("Client", back_populates="owner")
    orders = relationship("Order", back_populates="owner")
