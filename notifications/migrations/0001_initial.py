from django.db import migrations, models

import notifications.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("info", "Info"),
                            ("success", "Success"),
                            ("warning", "Warning"),
                            ("error", "Error"),
                            ("alert", "Alert"),
                        ],
                        default="info",
                        max_length=16,
                        verbose_name="Type",
                    ),
                ),
                ("title", models.CharField(max_length=150, verbose_name="Title")),
                ("message", models.TextField(verbose_name="Message")),
                (
                    "priority",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("critical", "Critical")],
                        default="medium",
                        max_length=16,
                        verbose_name="Priority",
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("inventory", "Inventory"),
                            ("sales", "Sales"),
                            ("customer", "Customer"),
                            ("vendor", "Vendor"),
                            ("system", "System"),
                            ("quality", "Quality"),
                            ("financial", "Financial"),
                        ],
                        default="system",
                        max_length=16,
                        verbose_name="Category",
                    ),
                ),
                ("action_required", models.BooleanField(default=False, verbose_name="Action required")),
                ("action_url", models.CharField(blank=True, max_length=255, verbose_name="Action URL")),
                (
                    "context",
                    models.JSONField(
                        blank=True, default=notifications.models._default_json_dict, verbose_name="Context"
                    ),
                ),
                ("read", models.BooleanField(default=False, verbose_name="Read")),
                ("read_at", models.DateTimeField(blank=True, null=True, verbose_name="Read at")),
                ("expires_at", models.DateTimeField(blank=True, null=True, verbose_name="Expires at")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "ordering": ("-created_at", "-id"),
                "indexes": [models.Index(fields=["read", "category"], name="notifications_read_cat_idx")],
            },
        ),
        migrations.CreateModel(
            name="TelegramBotConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "token",
                    models.CharField(
                        help_text="Token issued by BotFather. Keep it in a managed secret.",
                        max_length=255,
                        verbose_name="Access token",
                    ),
                ),
                ("chat_id", models.BigIntegerField(verbose_name="Alerts chat ID")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "default_parse_mode",
                    models.CharField(
                        blank=True,
                        choices=[("", "Plain text"), ("HTML", "HTML"), ("MarkdownV2", "Markdown V2")],
                        default="",
                        max_length=32,
                        verbose_name="Default parse mode",
                    ),
                ),
                ("last_sent_at", models.DateTimeField(blank=True, null=True, verbose_name="Last message sent")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
            ],
            options={
                "verbose_name": "Telegram bot",
                "verbose_name_plural": "Telegram bots",
                "ordering": ("name",),
            },
        ),
    ]
