from __future__ import annotations

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .forms import StaffMemberChangeForm, StaffMemberCreationForm
from .models import Role, RolePermission, StaffMember


class RolePermissionInline(admin.TabularInline):
    model = RolePermission
    extra = 0


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "permission_count")
    search_fields = ("name",)
    inlines = [RolePermissionInline]

    @admin.display(description="Permissions")
    def permission_count(self, obj: Role) -> int:
        return obj.role_permissions.count()


@admin.action(description="Activate selected staff")
def activate_staff(modeladmin, request, queryset):
    updated = queryset.update(is_active=True)
    messages.success(request, f"{updated} staff members activated.")


@admin.action(description="Deactivate selected staff")
def deactivate_staff(modeladmin, request, queryset):
    updated = queryset.update(is_active=False)
    messages.success(request, f"{updated} staff members deactivated.")


@admin.register(StaffMember)
class StaffMemberAdmin(UserAdmin):
    add_form = StaffMemberCreationForm
    form = StaffMemberChangeForm
    model = StaffMember

    list_display = (
        "employee_id",
        "full_name",
        "position",
        "list_roles",
        "total_collections",
        "average_quality",
        "is_active",
    )
    list_filter = ("is_active", "is_staff", "position", "department", "roles")
    search_fields = ("employee_id", "first_name", "last_name", "phone")
    ordering = ("last_name", "first_name")

    fieldsets = (
        (_("Credentials"), {"fields": ("employee_id", "password")}),
        (
            _("Personal information"),
            {"fields": ("first_name", "last_name", "email", "phone", "position", "department", "hire_date")},
        ),
        (
            _("Collection performance"),
            {"fields": ("total_collections", "average_quality", "on_time_rate", "metrics_updated_at")},
        ),
        (
            _("Roles and permissions"),
            {"fields": ("roles", "groups", "is_active", "is_staff", "is_superuser")},
        ),
        (_("Dates"), {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "employee_id",
                    "first_name",
                    "last_name",
                    "email",
                    "phone",
                    "position",
                    "department",
                    "hire_date",
                    "roles",
                    "groups",
                    "is_active",
                    "is_staff",
                    "password1",
                    "password2",
                ),
            },
        ),
    )

    filter_horizontal = ("roles", "groups", "user_permissions")
    readonly_fields = ("last_login", "date_joined", "total_collections", "average_quality", "on_time_rate", "metrics_updated_at")
    actions = (activate_staff, deactivate_staff)

    @admin.display(description="Roles")
    def list_roles(self, obj: StaffMember) -> str:
        return ", ".join(role.get_name_display() for role in obj.roles.all())
