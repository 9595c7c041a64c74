from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import users.managers


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="Role",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "name",
                    models.CharField(
                        choices=[
                            ("MANAGER", "Manager"),
                            ("CASHIER", "Cashier"),
                            ("COLLECTOR", "Collector"),
                            ("ADMIN", "Administrator"),
                            ("SUPERVISOR", "Supervisor"),
                        ],
                        max_length=32,
                        unique=True,
                    ),
                ),
            ],
            options={
                "verbose_name": "Role",
                "verbose_name_plural": "Roles",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="RolePermission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "permission_code",
                    models.CharField(
                        choices=[
                            ("pos_sales", "Make sales transactions"),
                            ("inventory_manage", "Manage products"),
                            ("customer_manage", "Manage customers"),
                            ("egg_collection", "Collect eggs from farms"),
                            ("vendor_manage", "Manage vendors"),
                            ("reports_view", "View reports"),
                            ("reports_export", "Export reports"),
                            ("credit_approve", "Approve credit transactions"),
                            ("settings_manage", "Change system settings"),
                            ("staff_manage", "Manage staff"),
                        ],
                        max_length=64,
                    ),
                ),
                (
                    "role",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="role_permissions",
                        to="users.role",
                    ),
                ),
            ],
            options={
                "verbose_name": "Role permission",
                "verbose_name_plural": "Role permissions",
                "ordering": ["role__name", "permission_code"],
                "unique_together": {("role", "permission_code")},
            },
        ),
        migrations.CreateModel(
            name="StaffMember",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("employee_id", models.CharField(max_length=32, unique=True, verbose_name="Employee ID")),
                ("first_name", models.CharField(max_length=150, verbose_name="First name")),
                ("last_name", models.CharField(max_length=150, verbose_name="Last name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("phone", models.CharField(blank=True, max_length=32, verbose_name="Phone")),
                (
                    "position",
                    models.CharField(
                        choices=[
                            ("MANAGER", "Manager"),
                            ("CASHIER", "Cashier"),
                            ("COLLECTOR", "Collector"),
                            ("ADMIN", "Administrator"),
                            ("SUPERVISOR", "Supervisor"),
                        ],
                        default="COLLECTOR",
                        max_length=16,
                        verbose_name="Position",
                    ),
                ),
                (
                    "department",
                    models.CharField(
                        choices=[
                            ("SALES", "Sales"),
                            ("COLLECTION", "Collection"),
                            ("INVENTORY", "Inventory"),
                            ("ADMIN", "Administration"),
                            ("MANAGEMENT", "Management"),
                        ],
                        default="COLLECTION",
                        max_length=16,
                        verbose_name="Department",
                    ),
                ),
                ("hire_date", models.DateField(blank=True, null=True, verbose_name="Hire date")),
                ("total_collections", models.PositiveIntegerField(default=0, verbose_name="Collections (30 days)")),
                (
                    "average_quality",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=4,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("5")),
                        ],
                        verbose_name="Average quality",
                    ),
                ),
                (
                    "on_time_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=5,
                        verbose_name="On-time rate (%)",
                    ),
                ),
                ("metrics_updated_at", models.DateTimeField(blank=True, null=True, verbose_name="Metrics updated at")),
                ("is_active", models.BooleanField(default=True)),
                ("is_staff", models.BooleanField(default=False)),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text=(
                            "The groups this user belongs to. A user will get all permissions granted to each of "
                            "their groups."
                        ),
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
                (
                    "roles",
                    models.ManyToManyField(blank=True, related_name="staff_members", to="users.role"),
                ),
            ],
            options={
                "verbose_name": "Staff member",
                "verbose_name_plural": "Staff members",
                "ordering": ["last_name", "first_name"],
            },
            managers=[
                ("objects", users.managers.StaffMemberManager()),
            ],
        ),
    ]
