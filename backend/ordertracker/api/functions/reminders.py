"""
Remote function endpoint for reminder dispatch.
Called with the anonymous API key; no request body.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ordertracker.api.v1.middleware import require_function_key
from ordertracker.core.logging import get_logger
from ordertracker.core.rate_limit import DEFAULT_LIMIT, limiter
from ordertracker.db.session import get_db
from ordertracker.deps.di_container import get_container
from ordertracker.schemas.reminder import ReminderDispatchResponse
from ordertracker.services.reminder_service import ReminderService

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/send-reminder-emails",
    response_model=ReminderDispatchResponse,
    dependencies=[Depends(require_function_key)],
)
@limiter.limit(DEFAULT_LIMIT)
async def send_reminder_emails(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Email clients whose installation is REMINDER_DAYS_AHEAD days out and
    mark their orders as reminded.
    """
    service = ReminderService(db, get_container().email_service())
    try:
        return await service.dispatch()
    except SQLAlchemyError as e:
        logger.exception("Reminder function failed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e)},
        )
