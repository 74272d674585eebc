"""
Reminder dispatch: emails clients whose installation is a few days out.
"""

from datetime import date, timedelta
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.core.config import settings
from ordertracker.core.logging import get_logger
from ordertracker.db.repositories.order_repository import ReminderOrderRepository
from ordertracker.schemas.reminder import ReminderDispatchResponse, ReminderResult
from ordertracker.services.base_service import BaseService
from ordertracker.services.email_service import EmailDeliveryError, EmailService

logger = get_logger(__name__)


class ReminderService(BaseService):
    """Service for the reminder function."""
    
    def __init__(self, session: AsyncSession, email_service: EmailService):
        self.session = session
        self.email_service = email_service
        self.order_repo = ReminderOrderRepository(session)
    
    async def dispatch(self, today: Optional[date] = None) -> ReminderDispatchResponse:
        """
        Send reminders for open orders installing REMINDER_DAYS_AHEAD days
        from today and flag them as reminded.
        
        Each order is committed on its own; a failure is recorded in the
        results and the remaining orders are still processed.
        """
        today = today or date.today()
        target = today + timedelta(days=settings.REMINDER_DAYS_AHEAD)
        orders = await self.order_repo.list_due(target)
        
        # Render up front: a rollback expires the loaded rows
        reminders = [self.email_service.build_reminder(order) for order in orders]
        
        results = []
        for reminder in reminders:
            try:
                await self.email_service.send(reminder)
                await self.order_repo.mark_reminded(reminder.order_id)
                await self.session.commit()
            except (EmailDeliveryError, SQLAlchemyError) as e:
                await self.session.rollback()
                logger.error(
                    f"Failed to send reminder for order {reminder.order_id}: {e}",
                    extra={"order_id": str(reminder.order_id)},
                )
                results.append(
                    ReminderResult(
                        order_id=reminder.order_id,
                        client_email=reminder.to,
                        status="failed",
                        error=str(e),
                    )
                )
                continue
            
            results.append(
                ReminderResult(
                    order_id=reminder.order_id,
                    client_email=reminder.to,
                    status="sent",
                )
            )
        
        logger.info(
            "Reminder check completed",
            extra={"target_date": str(target), "processed": len(results)},
        )
        return ReminderDispatchResponse(success=True, processed=len(results), results=results)
