from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = (
        "display_name",
        "customer_type",
        "credit_balance",
        "credit_status",
        "expected_hen_eggs",
        "expected_duck_eggs",
        "total_egg_sales",
        "active",
    )
    list_filter = ("customer_type", "credit_status", "active")
    search_fields = ("business_name", "contact_person", "phone", "email")
    readonly_fields = ("total_egg_sales", "created_at", "updated_at")
    fieldsets = (
        (None, {"fields": ("customer_type", "business_name", "contact_person", "email", "phone", "address", "active")}),
        ("Credit", {"fields": ("credit_limit", "credit_balance", "payment_terms", "credit_status")}),
        ("Farm", {"fields": ("farm_size", "expected_hen_eggs", "expected_duck_eggs", "total_egg_sales")}),
        ("Dates", {"fields": ("created_at", "updated_at")}),
    )
