"""
Dashboard service.
Rolls up revenue, balances and schedule alerts over the caller's visible orders.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.core.config import settings
from ordertracker.services.base_service import BaseService
from ordertracker.services.user_service import display_name
from ordertracker.db.repositories.order_repository import OrderRepository
from ordertracker.db.repositories.payment_repository import PaymentRepository
from ordertracker.db.repositories.user_repository import UserRepository
from ordertracker.models.user import UserProfile
from ordertracker.schemas.dashboard import (
    DashboardResponse,
    OutstandingOrder,
    UserMonthlySales,
)
from ordertracker.schemas.order import OrderResponse
from ordertracker.schemas.user import Identity
from ordertracker.utils.balances import (
    ZERO,
    monthly_sales_per_user,
    outstanding_orders,
    total_outstanding,
    total_revenue,
)
from ordertracker.utils.scheduling import is_active, overdue_orders, upcoming_orders

OUTSTANDING_ROWS = 10
MONTHS_PER_USER = 6


class DashboardService(BaseService):
    """Service for the financial overview."""
    
    def __init__(self, session: AsyncSession, identity: Identity):
        self.session = session
        self.identity = identity
        self.order_repo = OrderRepository(session, identity)
        self.payment_repo = PaymentRepository(session, identity)
        self.user_repo = UserRepository(session)
    
    def _monthly_sales(self, orders, users: List[UserProfile]) -> List[UserMonthlySales]:
        rows = []
        for user_id, months in monthly_sales_per_user(orders).items():
            recent = sorted(months.items(), reverse=True)[:MONTHS_PER_USER]
            rows.append(
                UserMonthlySales(
                    user_id=user_id,
                    user_name=display_name(user_id, users),
                    total=sum(months.values(), ZERO),
                    months=dict(recent),
                )
            )
        rows.sort(key=lambda row: row.total, reverse=True)
        return rows
    
    async def get_dashboard(self, today: Optional[date] = None) -> DashboardResponse:
        """
        Build the dashboard for the caller.
        
        Args:
            today: Reference day for overdue/upcoming checks; defaults to the
                current date
        """
        today = today or date.today()
        orders = await self.order_repo.list_all()
        payments = await self.payment_repo.list_for_orders(order.id for order in orders)
        users = await self.user_repo.list_ordered() if self.identity.is_admin else []
        
        balances = outstanding_orders(orders, payments)
        outstanding_rows = [
            OutstandingOrder(
                order_id=row.order.id,
                title=row.order.title,
                client_name=row.order.client.name if row.order.client else None,
                user_id=row.order.user_id,
                user_name=display_name(row.order.user_id, users) if self.identity.is_admin else None,
                total_amount=row.order.total_amount,
                total_paid=row.total_paid,
                outstanding=row.outstanding,
                overpaid=row.overpaid,
            )
            for row in balances[:OUTSTANDING_ROWS]
        ]
        
        return DashboardResponse(
            today=today,
            is_admin_view=self.identity.is_admin,
            active_orders=sum(1 for order in orders if is_active(order)),
            total_revenue=total_revenue(orders),
            total_outstanding=total_outstanding(orders, payments),
            outstanding_count=len(balances),
            outstanding_orders=outstanding_rows,
            overdue_orders=[OrderResponse.model_validate(o) for o in overdue_orders(orders, today)],
            upcoming_orders=[
                OrderResponse.model_validate(o)
                for o in upcoming_orders(orders, today, settings.UPCOMING_HORIZON_DAYS)
            ],
            monthly_sales_per_user=self._monthly_sales(orders, users) if self.identity.is_admin else None,
        )
