from __future__ import annotations

from typing import Any

from django.db import models
from django.utils import timezone


def _default_json_dict() -> dict[str, Any]:
    return {}


class NotificationQuerySet(models.QuerySet):
    def unread(self) -> "NotificationQuerySet":
        return self.filter(read=False)

    def current(self) -> "NotificationQuerySet":
        now = timezone.now()
        return self.filter(models.Q(expires_at__isnull=True) | models.Q(expires_at__gt=now))

    def expired(self) -> "NotificationQuerySet":
        return self.filter(expires_at__isnull=False, expires_at__lte=timezone.now())


class Notification(models.Model):
    class NotificationType(models.TextChoices):
        INFO = "info", "Info"
        SUCCESS = "success", "Success"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        ALERT = "alert", "Alert"

    class Priority(models.TextChoices):
        LOW = "low", "Low"
        MEDIUM = "medium", "Medium"
        HIGH = "high", "High"
        CRITICAL = "critical", "Critical"

    class Category(models.TextChoices):
        INVENTORY = "inventory", "Inventory"
        SALES = "sales", "Sales"
        CUSTOMER = "customer", "Customer"
        VENDOR = "vendor", "Vendor"
        SYSTEM = "system", "System"
        QUALITY = "quality", "Quality"
        FINANCIAL = "financial", "Financial"

    notification_type = models.CharField(
        "Type",
        max_length=16,
        choices=NotificationType.choices,
        default=NotificationType.INFO,
    )
    title = models.CharField("Title", max_length=150)
    message = models.TextField("Message")
    priority = models.CharField(
        "Priority",
        max_length=16,
        choices=Priority.choices,
        default=Priority.MEDIUM,
    )
    category = models.CharField(
        "Category",
        max_length=16,
        choices=Category.choices,
        default=Category.SYSTEM,
    )
    action_required = models.BooleanField("Action required", default=False)
    action_url = models.CharField("Action URL", max_length=255, blank=True)
    context = models.JSONField("Context", default=_default_json_dict, blank=True)
    read = models.BooleanField("Read", default=False)
    read_at = models.DateTimeField("Read at", null=True, blank=True)
    expires_at = models.DateTimeField("Expires at", null=True, blank=True)
    created_at = models.DateTimeField("Created at", auto_now_add=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=("read", "category"), name="notifications_read_cat_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.get_notification_type_display()} · {self.title}"

    def mark_read(self) -> None:
        if self.read:
            return
        self.read = True
        self.read_at = timezone.now()
        self.save(update_fields=("read", "read_at"))


class TelegramBotConfig(models.Model):
    class ParseMode(models.TextChoices):
        NONE = "", "Plain text"
        HTML = "HTML", "HTML"
        MARKDOWN = "MarkdownV2", "Markdown V2"

    name = models.CharField("Name", max_length=100, unique=True)
    description = models.TextField("Description", blank=True)
    token = models.CharField(
        "Access token",
        max_length=255,
        help_text="Token issued by BotFather. Keep it in a managed secret.",
    )
    chat_id = models.BigIntegerField("Alerts chat ID")
    is_active = models.BooleanField("Active", default=True)
    default_parse_mode = models.CharField(
        "Default parse mode",
        max_length=32,
        choices=ParseMode.choices,
        default=ParseMode.NONE,
        blank=True,
    )
    last_sent_at = models.DateTimeField("Last message sent", null=True, blank=True)
    created_at = models.DateTimeField("Created at", auto_now_add=True)
    updated_at = models.DateTimeField("Updated at", auto_now=True)

    class Meta:
        verbose_name = "Telegram bot"
        verbose_name_plural = "Telegram bots"
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name

    @property
    def api_base_url(self) -> str:
        return f"https://api.telegram.org/bot{self.token}"
