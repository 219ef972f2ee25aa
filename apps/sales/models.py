"""
Sales models for jewellery invoicing.

- Customers referenced by invoices
- Invoice header with commodity/making/discount/tax breakdown
- Invoice lines with the per-unit values the invoice was priced at
- Per-tenant invoice number counter
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from apps.core.models import Tenant
from apps.inventory.models import InventoryItem


class Customer(models.Model):
    """
    Customer of a jewellery shop.

    Invoices reference a customer optionally; walk-in sales have none.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the customer",
    )

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="customers",
        help_text="Tenant that owns this customer",
    )

    name = models.CharField(
        max_length=200,
        help_text="Customer's full name",
    )

    phone = models.CharField(
        max_length=20,
        help_text="Customer's phone number",
    )

    email = models.EmailField(
        null=True,
        blank=True,
        help_text="Customer's email address",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the customer was created",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the customer was last updated",
    )

    class Meta:
        db_table = "sales_customers"
        ordering = ["name"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        indexes = [
            models.Index(fields=["tenant", "phone"], name="cust_tenant_phone_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"


class Invoice(models.Model):
    """
    Invoice produced by a checkout.

    The header is written as PROVISIONAL at the start of a checkout and moved
    to FINALIZED once every line has been priced and its stock decremented.
    Both steps happen inside one database transaction, so a PROVISIONAL
    invoice is never visible to other connections.
    """

    # Status choices
    PROVISIONAL = "PROVISIONAL"
    FINALIZED = "FINALIZED"

    STATUS_CHOICES = [
        (PROVISIONAL, "Provisional"),
        (FINALIZED, "Finalized"),
    ]

    # Discount kinds
    DISCOUNT_NONE = "none"
    DISCOUNT_PERCENTAGE = "percentage"
    DISCOUNT_FIXED = "fixed"

    DISCOUNT_KIND_CHOICES = [
        (DISCOUNT_NONE, "No discount"),
        (DISCOUNT_PERCENTAGE, "Percentage of subtotal"),
        (DISCOUNT_FIXED, "Fixed amount"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the invoice",
    )

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="invoices",
        help_text="Tenant that owns this invoice",
    )

    invoice_number = models.CharField(
        max_length=50,
        help_text="Sequential invoice number, unique within the tenant",
    )

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invoices",
        help_text="Customer the invoice was issued to (optional)",
    )

    # Pricing inputs
    rate = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        validators=[MinValueValidator(Decimal("0.000001"))],
        help_text="Commodity rate per gram used to price this invoice",
    )

    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Tax rate applied, in percent",
    )

    discount_type = models.CharField(
        max_length=20,
        choices=DISCOUNT_KIND_CHOICES,
        default=DISCOUNT_NONE,
        help_text="Kind of discount applied",
    )

    discount_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Discount value as entered (percent or amount)",
    )

    # Computed amounts
    commodity_value_total = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Sum of commodity (metal) value over all lines",
    )

    making_charge_total = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Sum of making charges over all lines",
    )

    subtotal = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Commodity value plus making charges",
    )

    discount_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Discount amount deducted from the subtotal",
    )

    tax_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Tax on the taxable amount",
    )

    grand_total = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Taxable amount plus tax",
    )

    status = FSMField(
        default=PROVISIONAL,
        choices=STATUS_CHOICES,
        help_text="Invoice lifecycle status",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the invoice was created",
    )

    finalized_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the invoice was finalized",
    )

    class Meta:
        db_table = "invoices"
        ordering = ["-created_at"]
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"
        unique_together = [["tenant", "invoice_number"]]
        indexes = [
            models.Index(fields=["tenant", "-created_at"], name="invoice_tenant_date_idx"),
            models.Index(fields=["tenant", "status"], name="invoice_tenant_status_idx"),
            models.Index(fields=["customer", "-created_at"], name="invoice_cust_date_idx"),
        ]

    def __str__(self):
        return f"{self.invoice_number} - {self.grand_total}"

    @property
    def taxable_amount(self):
        return self.subtotal - self.discount_amount

    @transition(field=status, source=PROVISIONAL, target=FINALIZED)
    def finalize(self):
        """Mark the invoice as finalized. Caller saves."""
        self.finalized_at = timezone.now()


class InvoiceLine(models.Model):
    """
    One priced cart line.

    Values are per unit and already rounded, so
    ``price == commodity_value + making_charge`` holds exactly.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the invoice line",
    )

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="lines",
        help_text="Invoice that this line belongs to",
    )

    inventory_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.PROTECT,
        related_name="invoice_lines",
        help_text="Inventory item that was sold",
    )

    position = models.PositiveIntegerField(
        default=0,
        help_text="Order of the line within the invoice",
    )

    quantity = models.IntegerField(
        validators=[MinValueValidator(1)],
        help_text="Units sold",
    )

    weight = models.DecimalField(
        max_digits=14,
        decimal_places=6,
        help_text="Weight in grams used for pricing one unit",
    )

    commodity_value = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Metal value of one unit",
    )

    making_charge = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Making charge of one unit",
    )

    price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Price of one unit (commodity value + making charge)",
    )

    class Meta:
        db_table = "invoice_lines"
        ordering = ["position"]
        verbose_name = "Invoice Line"
        verbose_name_plural = "Invoice Lines"
        indexes = [
            models.Index(fields=["invoice"], name="invline_invoice_idx"),
            models.Index(fields=["inventory_item"], name="invline_item_idx"),
        ]

    def __str__(self):
        return f"{self.inventory_item_id} x {self.quantity}"

    @property
    def total(self):
        return self.price * self.quantity


class InvoiceSequence(models.Model):
    """
    Last issued invoice number per tenant.

    Read and incremented under ``select_for_update`` inside the checkout
    transaction.
    """

    tenant = models.OneToOneField(
        Tenant,
        on_delete=models.CASCADE,
        related_name="invoice_sequence",
        help_text="Tenant this counter belongs to",
    )

    last_number = models.PositiveIntegerField(
        default=0,
        help_text="Numeric part of the last invoice number issued",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
    )

    class Meta:
        db_table = "invoice_sequences"
        verbose_name = "Invoice Sequence"
        verbose_name_plural = "Invoice Sequences"

    def __str__(self):
        return f"{self.tenant} - {self.last_number}"
