"""
Django admin configuration for sales models.
"""

from django.contrib import admin

from .models import Customer, Invoice, InvoiceLine, InvoiceSequence


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer model."""

    list_display = ["name", "phone", "email", "tenant", "created_at"]
    list_filter = ["tenant", "created_at"]
    search_fields = ["name", "phone", "email"]
    readonly_fields = ["id", "created_at", "updated_at"]


class InvoiceLineInline(admin.TabularInline):
    """Read-only lines of an invoice."""

    model = InvoiceLine
    extra = 0
    can_delete = False
    fields = [
        "position",
        "inventory_item",
        "quantity",
        "weight",
        "commodity_value",
        "making_charge",
        "price",
    ]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """
    Admin interface for Invoice model.

    Invoices are written only by checkout; the admin is read-only.
    """

    list_display = [
        "invoice_number",
        "tenant",
        "customer",
        "subtotal",
        "discount_amount",
        "tax_amount",
        "grand_total",
        "status",
        "created_at",
    ]
    list_filter = ["status", "discount_type", "tenant", "created_at"]
    search_fields = ["invoice_number", "customer__name", "customer__phone"]
    date_hierarchy = "created_at"
    inlines = [InvoiceLineInline]
    fieldsets = [
        (
            "Invoice",
            {
                "fields": ["id", "tenant", "invoice_number", "customer", "status"],
            },
        ),
        (
            "Pricing Inputs",
            {
                "fields": ["rate", "tax_rate", "discount_type", "discount_value"],
            },
        ),
        (
            "Amounts",
            {
                "fields": [
                    "commodity_value_total",
                    "making_charge_total",
                    "subtotal",
                    "discount_amount",
                    "tax_amount",
                    "grand_total",
                ],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "finalized_at"],
            },
        ),
    ]

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False


@admin.register(InvoiceSequence)
class InvoiceSequenceAdmin(admin.ModelAdmin):
    """Admin interface for InvoiceSequence model."""

    list_display = ["tenant", "last_number", "updated_at"]
    readonly_fields = ["tenant", "last_number", "updated_at"]
