"""
Reminder dispatch schemas.
"""

from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID


class ReminderResult(BaseModel):
    """Outcome for one order."""
    order_id: UUID
    client_email: Optional[str] = None
    status: str
    error: Optional[str] = None


class ReminderDispatchResponse(BaseModel):
    """Summary of one reminder run."""
    success: bool = True
    processed: int
    results: List[ReminderResult]
