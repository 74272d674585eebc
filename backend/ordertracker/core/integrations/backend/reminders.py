"""
Trigger the reminder function from a client or a scheduler.
"""

from ordertracker.core.config import Settings
from ordertracker.core.integrations.http.http_client import HttpClient
from ordertracker.schemas.reminder import ReminderDispatchResponse


async def send_reminder_emails(http_client: HttpClient, settings: Settings) -> ReminderDispatchResponse:
    """
    POST to the reminder function with the anonymous API key.
    
    Raises:
        PersistenceError: If the function fails or is unreachable
    """
    data = await http_client.post(
        f"{settings.FUNCTIONS_PREFIX}/send-reminder-emails",
        headers={"Authorization": f"Bearer {settings.ANON_KEY}"},
    )
    return ReminderDispatchResponse.model_validate(data)
