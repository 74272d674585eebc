"""
Database models.
Importing this package registers every table with Base.metadata.
"""

from ordertracker.models.user import UserProfile, UserRole
from ordertracker.models.client import Client
from ordertracker.models.order import Order, OrderStatus, CLOSED_STATUSES
from ordertracker.models.payment import Payment, PaymentMethod

__all__ = [
    "UserProfile",
    "UserRole",
    "Client",
    "Order",
    "OrderStatus",
    "CLOSED_STATUSES",
    "Payment",
    "PaymentMethod",
]
