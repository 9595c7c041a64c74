from __future__ import annotations

from django.urls import path

from .views import NotificationMarkAllReadView, NotificationMarkReadView, UnreadNotificationListView

app_name = "notifications"

urlpatterns = [
    path("unread/", UnreadNotificationListView.as_view(), name="unread"),
    path("<int:notification_id>/read/", NotificationMarkReadView.as_view(), name="mark-read"),
    path("read-all/", NotificationMarkAllReadView.as_view(), name="mark-all-read"),
]
