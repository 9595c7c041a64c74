from __future__ import annotations

from django.contrib import admin

from .models import CollectionRoute, EggCollection, PaymentRecord, RouteStop


class RouteStopInline(admin.TabularInline):
    model = RouteStop
    extra = 0
    autocomplete_fields = ("farmer",)
    ordering = ("position",)


@admin.register(CollectionRoute)
class CollectionRouteAdmin(admin.ModelAdmin):
    list_display = ("name", "collector", "schedule", "estimated_time", "distance", "active")
    list_filter = ("schedule", "active")
    search_fields = ("name", "description")
    inlines = (RouteStopInline,)


@admin.register(EggCollection)
class EggCollectionAdmin(admin.ModelAdmin):
    list_display = (
        "pk",
        "collection_date",
        "farmer",
        "collector",
        "route",
        "total_hen_eggs",
        "total_duck_eggs",
        "total_value",
        "paid",
        "synced",
    )
    list_filter = ("paid", "synced", "route")
    search_fields = ("farmer__business_name", "farmer__contact_person", "quality_notes")
    date_hierarchy = "collection_date"
    list_select_related = ("farmer", "collector", "route")
    readonly_fields = ("total_hen_eggs", "total_duck_eggs", "total_value", "created_at", "updated_at")
    fieldsets = (
        (None, {"fields": ("farmer", "collector", "route", "collection_date")}),
        ("Hen eggs", {"fields": ("hen_small", "hen_medium", "hen_large", "hen_extra_large", "hen_damaged")}),
        ("Duck eggs", {"fields": ("duck_small", "duck_medium", "duck_large", "duck_damaged")}),
        ("Prices", {"fields": ("hen_egg_price", "duck_egg_price", "total_hen_eggs", "total_duck_eggs", "total_value")}),
        ("Status", {"fields": ("quality_notes", "paid", "payment_date", "synced", "created_at", "updated_at")}),
    )


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    list_display = ("pk", "payment_type", "customer", "collection", "amount", "payment_method", "payment_date")
    list_filter = ("payment_type", "payment_method")
    search_fields = ("notes", "customer__business_name", "customer__contact_person")
    date_hierarchy = "payment_date"
