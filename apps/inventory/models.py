"""
Inventory models for jewellery shop management.

- SKU-level stock tracking per tenant
- Metal type, purity and gross/net weight for weight-based pricing
- Making charge configuration (per gram or percentage of metal value)
- Version counter for compare-and-swap stock writes
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from apps.core.models import Tenant


class InventoryItem(models.Model):
    """
    Main inventory tracking model for jewellery items.

    Quantity is the number of sellable units on hand. It never goes below
    zero: the database enforces it with a check constraint and checkout
    decrements it through ``reserve_stock``, which only writes when both the
    version and the available quantity still match what the caller read.
    """

    # Metal type choices
    GOLD = "GOLD"
    SILVER = "SILVER"
    PLATINUM = "PLATINUM"
    DIAMOND = "DIAMOND"

    METAL_TYPE_CHOICES = [
        (GOLD, "Gold"),
        (SILVER, "Silver"),
        (PLATINUM, "Platinum"),
        (DIAMOND, "Diamond"),
    ]

    # Purity choices
    PURITY_CHOICES = [
        ("24K", "24 Karat"),
        ("22K", "22 Karat"),
        ("18K", "18 Karat"),
        ("14K", "14 Karat"),
        ("925", "Sterling 925"),
        ("OTHER", "Other"),
    ]

    # Making charge kinds
    CHARGE_FIXED = "fixed"
    CHARGE_PERCENTAGE = "percentage"

    MAKING_CHARGE_KIND_CHOICES = [
        (CHARGE_FIXED, "Fixed amount per gram"),
        (CHARGE_PERCENTAGE, "Percentage of metal value"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the inventory item",
    )

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="inventory_items",
        help_text="Tenant that owns this inventory item",
    )

    # Basic information
    sku = models.CharField(
        max_length=100,
        help_text="Stock keeping unit, unique within the tenant",
    )

    name = models.CharField(
        max_length=255,
        help_text="Item name",
    )

    # Jewellery-specific attributes
    metal_type = models.CharField(
        max_length=20,
        choices=METAL_TYPE_CHOICES,
        default=GOLD,
        help_text="Precious metal the item is made of",
    )

    purity = models.CharField(
        max_length=10,
        choices=PURITY_CHOICES,
        default="22K",
        help_text="Metal purity (karat or fineness)",
    )

    gross_weight = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.001"))],
        help_text="Gross weight in grams (including stones)",
    )

    net_weight = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.001"))],
        help_text="Net metal weight in grams, used for pricing",
    )

    # Pricing configuration
    making_charge = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Making charge value, interpreted according to making_charge_type",
    )

    making_charge_type = models.CharField(
        max_length=20,
        choices=MAKING_CHARGE_KIND_CHOICES,
        default=CHARGE_PERCENTAGE,
        help_text="Whether the making charge is per gram or a percentage of metal value",
    )

    # Inventory tracking
    quantity = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Current quantity in stock",
    )

    version = models.PositiveIntegerField(
        default=0,
        help_text="Incremented on every stock write; used for optimistic concurrency",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this item is active in inventory",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the item was added to inventory",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the item was last updated",
    )

    class Meta:
        db_table = "inventory_items"
        ordering = ["-created_at"]
        verbose_name = "Inventory Item"
        verbose_name_plural = "Inventory Items"
        unique_together = [["tenant", "sku"]]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0), name="inv_quantity_non_negative"
            ),
        ]
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="inv_tenant_active_idx"),
            models.Index(fields=["tenant", "metal_type"], name="inv_tenant_metal_idx"),
            models.Index(fields=["tenant", "quantity"], name="inv_tenant_quantity_idx"),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name}"

    def save(self, *args, **kwargs):
        """
        Override save to bump the version on every update of an existing row.
        """
        if not self._state.adding:
            self.version += 1
            update_fields = kwargs.get("update_fields")
            if update_fields is not None:
                kwargs["update_fields"] = {*update_fields, "version"}
        super().save(*args, **kwargs)

    def is_low_stock(self, threshold):
        """Check if item is in stock but at or below the alert threshold."""
        return 0 < self.quantity <= threshold

    def is_out_of_stock(self):
        """Check if item is out of stock."""
        return self.quantity == 0

    def can_deduct_quantity(self, quantity):
        """Check if we can deduct the specified quantity."""
        return self.quantity >= quantity

    def reserve_stock(self, quantity):
        """
        Deduct quantity if, and only if, the row is unchanged since it was read.

        The UPDATE is conditioned on the version this instance holds and on the
        stock still covering the request, so two writers can never both succeed
        against the same read.

        Args:
            quantity: Units to deduct

        Returns:
            True when the row was updated, False when it changed underneath us
            or no longer has enough stock. On success the instance is updated
            in place.
        """
        updated = InventoryItem.objects.filter(
            pk=self.pk, version=self.version, quantity__gte=quantity
        ).update(
            quantity=F("quantity") - quantity,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if updated:
            self.quantity -= quantity
            self.version += 1
        return bool(updated)
