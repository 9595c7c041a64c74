from __future__ import annotations

from django.contrib import admin

from . import models


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "notification_type", "priority", "category", "read", "created_at")
    list_filter = ("notification_type", "priority", "category", "read")
    search_fields = ("title", "message")
    readonly_fields = ("context", "created_at", "read_at")
    date_hierarchy = "created_at"


@admin.register(models.TelegramBotConfig)
class TelegramBotConfigAdmin(admin.ModelAdmin):
    list_display = ("name", "chat_id", "is_active", "default_parse_mode", "last_sent_at")
    list_filter = ("is_active", "default_parse_mode")
    search_fields = ("name", "description")
    readonly_fields = ("api_base_url", "last_sent_at", "created_at", "updated_at")
    fieldsets = (
        ("Identification", {"fields": ("name", "description", "token", "chat_id", "is_active")}),
        ("Configuration", {"fields": ("default_parse_mode",)}),
        ("Audit", {"fields": ("api_base_url", "last_sent_at", "created_at", "updated_at")}),
    )
