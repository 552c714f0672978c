from .dispatcher import FAILED, SENT, SKIPPED, NotificationDispatcher
from .email_service import EmailNotificationService
from .telegram_service import TelegramNotificationService

__all__ = [
    "NotificationDispatcher", "EmailNotificationService", "TelegramNotificationService",
    "SENT", "SKIPPED", "FAILED",
]
