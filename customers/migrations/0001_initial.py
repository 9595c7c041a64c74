from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "customer_type",
                    models.CharField(
                        choices=[("farmer", "Farmer"), ("regular", "Regular"), ("wholesale", "Wholesale")],
                        default="regular",
                        max_length=16,
                        verbose_name="Type",
                    ),
                ),
                ("business_name", models.CharField(blank=True, max_length=150, verbose_name="Business name")),
                ("contact_person", models.CharField(max_length=150, verbose_name="Contact person")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("phone", models.CharField(blank=True, max_length=32, verbose_name="Phone")),
                ("address", models.CharField(blank=True, max_length=255, verbose_name="Address")),
                (
                    "credit_limit",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12, verbose_name="Credit limit"),
                ),
                (
                    "credit_balance",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Outstanding amount. Egg collections reduce it by their value.",
                        max_digits=14,
                        verbose_name="Credit balance",
                    ),
                ),
                ("payment_terms", models.PositiveSmallIntegerField(default=30, verbose_name="Payment terms (days)")),
                (
                    "credit_status",
                    models.CharField(
                        choices=[
                            ("good", "Good"),
                            ("warning", "Warning"),
                            ("overdue", "Overdue"),
                            ("blocked", "Blocked"),
                        ],
                        default="good",
                        max_length=16,
                        verbose_name="Credit status",
                    ),
                ),
                (
                    "farm_size",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=8, null=True, verbose_name="Farm size (acres)"
                    ),
                ),
                (
                    "expected_hen_eggs",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Rolling average of the last collections. Empty while unknown.",
                        null=True,
                        verbose_name="Expected hen eggs per day",
                    ),
                ),
                (
                    "expected_duck_eggs",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="Expected duck eggs per day"),
                ),
                (
                    "total_purchases",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0"), max_digits=14, verbose_name="Total purchases"
                    ),
                ),
                (
                    "total_egg_sales",
                    models.DecimalField(
                        decimal_places=4, default=Decimal("0"), max_digits=14, verbose_name="Total egg sales"
                    ),
                ),
                ("active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Customer",
                "verbose_name_plural": "Customers",
                "ordering": ("contact_person",),
                "indexes": [models.Index(fields=["customer_type", "active"], name="customers_type_active_idx")],
            },
        ),
    ]
