import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the inventory item",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "sku",
                    models.CharField(
                        help_text="Stock keeping unit, unique within the tenant", max_length=100
                    ),
                ),
                ("name", models.CharField(help_text="Item name", max_length=255)),
                (
                    "metal_type",
                    models.CharField(
                        choices=[
                            ("GOLD", "Gold"),
                            ("SILVER", "Silver"),
                            ("PLATINUM", "Platinum"),
                            ("DIAMOND", "Diamond"),
                        ],
                        default="GOLD",
                        help_text="Precious metal the item is made of",
                        max_length=20,
                    ),
                ),
                (
                    "purity",
                    models.CharField(
                        choices=[
                            ("24K", "24 Karat"),
                            ("22K", "22 Karat"),
                            ("18K", "18 Karat"),
                            ("14K", "14 Karat"),
                            ("925", "Sterling 925"),
                            ("OTHER", "Other"),
                        ],
                        default="22K",
                        help_text="Metal purity (karat or fineness)",
                        max_length=10,
                    ),
                ),
                (
                    "gross_weight",
                    models.DecimalField(
                        decimal_places=3,
                        help_text="Gross weight in grams (including stones)",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.001"))],
                    ),
                ),
                (
                    "net_weight",
                    models.DecimalField(
                        decimal_places=3,
                        help_text="Net metal weight in grams, used for pricing",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.001"))],
                    ),
                ),
                (
                    "making_charge",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Making charge value, interpreted according to making_charge_type",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "making_charge_type",
                    models.CharField(
                        choices=[
                            ("fixed", "Fixed amount per gram"),
                            ("percentage", "Percentage of metal value"),
                        ],
                        default="percentage",
                        help_text="Whether the making charge is per gram or a percentage of metal value",
                        max_length=20,
                    ),
                ),
                (
                    "quantity",
                    models.IntegerField(
                        default=0,
                        help_text="Current quantity in stock",
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "version",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Incremented on every stock write; used for optimistic concurrency",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True, help_text="Whether this item is active in inventory"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the item was added to inventory"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="When the item was last updated"
                    ),
                ),
                (
                    "tenant",
                    models.ForeignKey(
                        help_text="Tenant that owns this inventory item",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inventory_items",
                        to="core.tenant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Inventory Item",
                "verbose_name_plural": "Inventory Items",
                "db_table": "inventory_items",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "is_active"], name="inv_tenant_active_idx"),
                    models.Index(fields=["tenant", "metal_type"], name="inv_tenant_metal_idx"),
                    models.Index(fields=["tenant", "quantity"], name="inv_tenant_quantity_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 0)),
                        name="inv_quantity_non_negative",
                    )
                ],
                "unique_together": {("tenant", "sku")},
            },
        ),
    ]
