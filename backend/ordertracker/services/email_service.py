"""
Email service for installation reminders.
No delivery provider is wired in; sending records the message in the log.
"""

from html import escape
from uuid import UUID

from pydantic import BaseModel

from ordertracker.core.config import settings
from ordertracker.core.logging import get_logger
from ordertracker.models.order import Order

logger = get_logger(__name__)


class EmailDeliveryError(Exception):
    """A reminder could not be handed to the mail transport."""
    pass


class ReminderEmail(BaseModel):
    """Rendered reminder ready to send."""
    order_id: UUID
    to: str
    subject: str
    html: str


class EmailService:
    """Renders and sends installation reminders."""
    
    def build_reminder(self, order: Order) -> ReminderEmail:
        """Render the reminder for an order; the order's client must be loaded."""
        client = order.client
        when = order.installation_date.strftime("%A, %B %d, %Y")
        notes = f"<p><strong>Notes:</strong> {escape(order.notes)}</p>" if order.notes else ""
        html = (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            '<h2 style="color: #2563eb;">Installation Reminder</h2>'
            f"<p>Dear {escape(client.name)},</p>"
            f"<p>This is a friendly reminder that your installation for <strong>{escape(order.title)}</strong> "
            f"is scheduled for <strong>{when}</strong>.</p>"
            '<div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">'
            '<h3 style="margin-top: 0; color: #374151;">Order Details:</h3>'
            f"<p><strong>Description:</strong> {escape(order.description)}</p>"
            f"<p><strong>Installation Address:</strong> {escape(client.address)}</p>"
            f"<p><strong>Total Amount:</strong> ${order.total_amount:,.2f}</p>"
            f"{notes}"
            "</div>"
            "<p>Please ensure someone is available at the scheduled time. If you need to reschedule, "
            "please contact us as soon as possible.</p>"
            "<p>Thank you for your business!</p>"
            f'<p style="font-size: 12px; color: #6b7280;">This is an automated reminder from {settings.PROJECT_NAME}.</p>'
            "</div>"
        )
        return ReminderEmail(
            order_id=order.id,
            to=client.email,
            subject=f"Installation reminder: {order.title}",
            html=html,
        )
    
    async def send(self, email: ReminderEmail) -> None:
        """
        Send a rendered reminder.
        
        Raises:
            EmailDeliveryError: If the message has no usable recipient
        """
        if not email.to or "@" not in email.to:
            raise EmailDeliveryError(f"Invalid recipient address: {email.to!r}")

        logger.info(
            f"Email reminder sent to {email.to}",
            extra={"order_id": str(email.order_id), "subject": email.subject},
        )
