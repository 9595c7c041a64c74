from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from ..models import Notification
from .telegram import TelegramNotificationError, TelegramNotificationSender

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QualityAlert:
    farmer_id: int
    collection_id: int
    damage_rate: float
    farmer_name: str = ""
    notes: str = ""


@dataclass(frozen=True)
class SpeciesCounts:
    hen: int
    duck: int


@dataclass(frozen=True)
class ProductionAlert:
    farmer_id: int
    expected: SpeciesCounts
    actual: SpeciesCounts
    farmer_name: str = ""

    @property
    def hen_shortfall(self) -> int:
        return self.expected.hen - self.actual.hen

    @property
    def duck_shortfall(self) -> int:
        return self.expected.duck - self.actual.duck


@dataclass
class NotificationService:
    """Stores alerts in the notification feed and forwards them to Telegram."""

    telegram_sender: Optional[Callable[[Notification], Any]] = None
    quality_alerts_enabled: Optional[bool] = None
    system_alerts_enabled: Optional[bool] = None
    forward_to_telegram: bool = True
    _sent: list[Notification] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.quality_alerts_enabled is None:
            self.quality_alerts_enabled = getattr(settings, "NOTIFICATIONS_QUALITY_ALERTS_ENABLED", True)
        if self.system_alerts_enabled is None:
            self.system_alerts_enabled = getattr(settings, "NOTIFICATIONS_SYSTEM_ALERTS_ENABLED", True)
        if self.telegram_sender is None and self.forward_to_telegram:
            self.telegram_sender = TelegramNotificationSender(
                timeout=getattr(settings, "TELEGRAM_TIMEOUT_SECONDS", 10.0),
            )

    @property
    def sent(self) -> list[Notification]:
        """Notifications created through this instance, oldest first."""
        return list(self._sent)

    def send_notification(
        self,
        *,
        title: str,
        message: str,
        notification_type: str = Notification.NotificationType.INFO,
        priority: str = Notification.Priority.MEDIUM,
        category: str = Notification.Category.SYSTEM,
        action_required: bool = False,
        action_url: str = "",
        context: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ) -> Notification:
        notification = Notification.objects.create(
            notification_type=notification_type,
            title=title,
            message=message,
            priority=priority,
            category=category,
            action_required=action_required,
            action_url=action_url,
            context=context or {},
            expires_at=expires_at,
        )
        self._sent.append(notification)
        if self.telegram_sender:
            transaction.on_commit(lambda: self._forward(notification))
        return notification

    def _forward(self, notification: Notification) -> None:
        try:
            self.telegram_sender(notification)
        except TelegramNotificationError as exc:
            logger.warning(
                "Unable to forward notification %s to Telegram: %s",
                notification.pk,
                exc,
                exc_info=exc,
            )

    def send_quality_alert(self, alert: QualityAlert) -> Notification | None:
        if not self.quality_alerts_enabled:
            logger.info("Quality alerts are disabled; skipping collection %s.", alert.collection_id)
            return None

        farm_label = alert.farmer_name or f"Farm {alert.farmer_id}"
        return self.send_notification(
            notification_type=Notification.NotificationType.WARNING,
            title="Quality Issue Detected",
            message=f"High damage rate ({alert.damage_rate * 100:.1f}%) in egg collection from {farm_label}",
            priority=Notification.Priority.HIGH,
            category=Notification.Category.QUALITY,
            action_required=True,
            action_url=f"/eggs/collections/{alert.collection_id}",
            context={
                "farmer_id": alert.farmer_id,
                "collection_id": alert.collection_id,
                "damage_rate": alert.damage_rate,
                "notes": alert.notes,
            },
        )

    def send_production_alert(self, alert: ProductionAlert) -> Notification:
        farm_label = alert.farmer_name or f"Farm {alert.farmer_id}"
        return self.send_notification(
            notification_type=Notification.NotificationType.WARNING,
            title="Low Production Alert",
            message=(
                f"{farm_label} production below expected levels. "
                f"Hen: -{alert.hen_shortfall}, Duck: -{alert.duck_shortfall}"
            ),
            priority=Notification.Priority.MEDIUM,
            category=Notification.Category.QUALITY,
            action_required=False,
            action_url=f"/customers/{alert.farmer_id}",
            context={
                "farmer_id": alert.farmer_id,
                "expected": {"hen": alert.expected.hen, "duck": alert.expected.duck},
                "actual": {"hen": alert.actual.hen, "duck": alert.actual.duck},
            },
        )

    def send_system_alert(self, title: str, message: str, severity: str = "medium") -> Notification | None:
        if not self.system_alerts_enabled:
            return None
        is_critical = severity == Notification.Priority.CRITICAL
        return self.send_notification(
            notification_type=Notification.NotificationType.ERROR if is_critical else Notification.NotificationType.WARNING,
            title=title,
            message=message,
            priority=severity,
            category=Notification.Category.SYSTEM,
            action_required=is_critical,
        )

    @staticmethod
    def unread(category: str | None = None):
        queryset = Notification.objects.current().unread()
        if category:
            queryset = queryset.filter(category=category)
        return queryset

    @staticmethod
    def mark_read(notification_id: int) -> Notification:
        notification = Notification.objects.get(pk=notification_id)
        notification.mark_read()
        return notification

    @staticmethod
    def mark_all_read() -> int:
        return Notification.objects.unread().update(read=True, read_at=timezone.now())

    @staticmethod
    def purge_expired() -> int:
        with transaction.atomic():
            deleted, _ = Notification.objects.expired().delete()
        return deleted
