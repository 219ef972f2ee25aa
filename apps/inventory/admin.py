"""
Admin configuration for inventory models.
"""

from django.contrib import admin

from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    """Admin interface for InventoryItem."""

    list_display = [
        "sku",
        "name",
        "tenant",
        "metal_type",
        "purity",
        "net_weight",
        "quantity",
        "is_active",
    ]
    list_filter = [
        "is_active",
        "metal_type",
        "purity",
        "making_charge_type",
        "created_at",
    ]
    search_fields = [
        "sku",
        "name",
        "tenant__company_name",
    ]
    readonly_fields = ["id", "version", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "tenant", "sku", "name", "is_active"),
            },
        ),
        (
            "Metal",
            {
                "fields": ("metal_type", "purity", "gross_weight", "net_weight"),
            },
        ),
        (
            "Pricing",
            {
                "fields": ("making_charge", "making_charge_type"),
            },
        ),
        (
            "Stock",
            {
                "fields": ("quantity", "version"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
