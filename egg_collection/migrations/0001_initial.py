from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CollectionRoute",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150, unique=True, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "schedule",
                    models.CharField(
                        choices=[("daily", "Daily"), ("alternate", "Alternate days"), ("weekly", "Weekly")],
                        default="daily",
                        max_length=16,
                        verbose_name="Schedule",
                    ),
                ),
                ("estimated_time", models.PositiveIntegerField(default=0, verbose_name="Estimated time (min)")),
                (
                    "distance",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=8, verbose_name="Distance (km)"),
                ),
                ("active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "collector",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="collection_routes",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned collector",
                    ),
                ),
            ],
            options={
                "verbose_name": "Collection route",
                "verbose_name_plural": "Collection routes",
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="RouteStop",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveSmallIntegerField(default=0, verbose_name="Position")),
                (
                    "farmer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="route_stops",
                        to="customers.customer",
                        verbose_name="Farmer",
                    ),
                ),
                (
                    "route",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stops",
                        to="egg_collection.collectionroute",
                        verbose_name="Route",
                    ),
                ),
            ],
            options={
                "verbose_name": "Route stop",
                "verbose_name_plural": "Route stops",
                "ordering": ("route__name", "position", "pk"),
                "unique_together": {("route", "farmer")},
            },
        ),
        migrations.AddField(
            model_name="collectionroute",
            name="farmers",
            field=models.ManyToManyField(
                related_name="collection_routes",
                through="egg_collection.RouteStop",
                to="customers.customer",
                verbose_name="Farmers",
            ),
        ),
        migrations.CreateModel(
            name="EggCollection",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "collection_date",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="Collection date"),
                ),
                ("hen_small", models.PositiveIntegerField(default=0, verbose_name="Hen small")),
                ("hen_medium", models.PositiveIntegerField(default=0, verbose_name="Hen medium")),
                ("hen_large", models.PositiveIntegerField(default=0, verbose_name="Hen large")),
                ("hen_extra_large", models.PositiveIntegerField(default=0, verbose_name="Hen extra large")),
                ("hen_damaged", models.PositiveIntegerField(default=0, verbose_name="Hen damaged")),
                ("duck_small", models.PositiveIntegerField(default=0, verbose_name="Duck small")),
                ("duck_medium", models.PositiveIntegerField(default=0, verbose_name="Duck medium")),
                ("duck_large", models.PositiveIntegerField(default=0, verbose_name="Duck large")),
                ("duck_damaged", models.PositiveIntegerField(default=0, verbose_name="Duck damaged")),
                (
                    "hen_egg_price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                        verbose_name="Hen price per dozen",
                    ),
                ),
                (
                    "duck_egg_price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                        verbose_name="Duck price per dozen",
                    ),
                ),
                (
                    "total_hen_eggs",
                    models.PositiveIntegerField(default=0, editable=False, verbose_name="Total hen eggs"),
                ),
                (
                    "total_duck_eggs",
                    models.PositiveIntegerField(default=0, editable=False, verbose_name="Total duck eggs"),
                ),
                (
                    "total_value",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        editable=False,
                        max_digits=14,
                        verbose_name="Total value",
                    ),
                ),
                ("quality_notes", models.TextField(blank=True, verbose_name="Quality notes")),
                ("paid", models.BooleanField(default=False, verbose_name="Paid")),
                ("payment_date", models.DateTimeField(blank=True, null=True, verbose_name="Payment date")),
                ("synced", models.BooleanField(default=False, verbose_name="Synced")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "collector",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="egg_collections",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Collector",
                    ),
                ),
                (
                    "farmer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="egg_collections",
                        to="customers.customer",
                        verbose_name="Farmer",
                    ),
                ),
                (
                    "route",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="collections",
                        to="egg_collection.collectionroute",
                        verbose_name="Route",
                    ),
                ),
            ],
            options={
                "verbose_name": "Egg collection",
                "verbose_name_plural": "Egg collections",
                "ordering": ("-collection_date", "-pk"),
                "indexes": [
                    models.Index(fields=["farmer", "collection_date"], name="eggcol_farmer_date_idx"),
                    models.Index(fields=["route", "collection_date"], name="eggcol_route_date_idx"),
                    models.Index(fields=["collector", "collection_date"], name="eggcol_collector_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "payment_type",
                    models.CharField(
                        choices=[("customer_payment", "Customer payment"), ("vendor_payment", "Vendor payment")],
                        default="customer_payment",
                        max_length=24,
                        verbose_name="Type",
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="Amount")),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("cash", "Cash"),
                            ("bank_transfer", "Bank transfer"),
                            ("mobile_money", "Mobile money"),
                            ("check", "Check"),
                            ("credit", "Credit"),
                        ],
                        default="bank_transfer",
                        max_length=24,
                        verbose_name="Payment method",
                    ),
                ),
                (
                    "payment_date",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="Payment date"),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "collection",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payment_records",
                        to="egg_collection.eggcollection",
                        verbose_name="Egg collection",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payment_records",
                        to="customers.customer",
                        verbose_name="Customer",
                    ),
                ),
                (
                    "processed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="processed_payments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Processed by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment record",
                "verbose_name_plural": "Payment records",
                "ordering": ("-payment_date", "-pk"),
            },
        ),
    ]
