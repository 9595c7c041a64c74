from .alerts import NotificationService, ProductionAlert, QualityAlert, SpeciesCounts
from .telegram import TelegramAPIClient, TelegramNotificationError, TelegramNotificationSender

__all__ = [
    "NotificationService",
    "ProductionAlert",
    "QualityAlert",
    "SpeciesCounts",
    "TelegramAPIClient",
    "TelegramNotificationSender",
    "TelegramNotificationError",
]
