from __future__ import annotations

from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views import View

from agropos.mixins import StaffRequiredMixin

from .models import Notification
from .services import NotificationService


def _notification_payload(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.pk,
        "type": notification.notification_type,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority,
        "category": notification.category,
        "action_required": notification.action_required,
        "action_url": notification.action_url,
        "read": notification.read,
        "created_at": notification.created_at.isoformat(),
        "expires_at": notification.expires_at.isoformat() if notification.expires_at else None,
    }


class UnreadNotificationListView(StaffRequiredMixin, View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        category = request.GET.get("category") or None
        notifications = NotificationService.unread(category)[:100]
        payload = [_notification_payload(notification) for notification in notifications]
        return JsonResponse({"notifications": payload, "count": len(payload)})


class NotificationMarkReadView(StaffRequiredMixin, View):
    http_method_names = ["post"]

    def post(self, request: HttpRequest, notification_id: int, *args: Any, **kwargs: Any) -> JsonResponse:
        try:
            notification = NotificationService.mark_read(notification_id)
        except Notification.DoesNotExist:
            return JsonResponse({"error": "Notification not found."}, status=404)
        return JsonResponse({"notification": _notification_payload(notification)})


class NotificationMarkAllReadView(StaffRequiredMixin, View):
    http_method_names = ["post"]

    def post(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        updated = NotificationService.mark_all_read()
        return JsonResponse({"updated": updated})
