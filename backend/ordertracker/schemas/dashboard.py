"""
Dashboard response schemas.
"""

from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date
from decimal import Decimal
from uuid import UUID

from ordertracker.schemas.order import OrderResponse


class OutstandingOrder(BaseModel):
    """Row of the amounts-outstanding table."""
    order_id: UUID
    title: str
    client_name: Optional[str] = None
    user_id: UUID
    user_name: Optional[str] = None
    total_amount: Decimal
    total_paid: Decimal
    outstanding: Decimal
    overpaid: bool = False


class UserMonthlySales(BaseModel):
    """Monthly revenue of one user, most recent month first."""
    user_id: UUID
    user_name: str
    total: Decimal
    months: Dict[str, Decimal]


class DashboardResponse(BaseModel):
    """Financial overview scoped to the caller's visibility."""
    today: date
    is_admin_view: bool
    active_orders: int
    total_revenue: Decimal
    total_outstanding: Decimal
    outstanding_count: int
    outstanding_orders: List[OutstandingOrder]
    overdue_orders: List[OrderResponse]
    upcoming_orders: List[OrderResponse]
    monthly_sales_per_user: Optional[List[UserMonthlySales]] = None
