import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the customer",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(help_text="Customer's full name", max_length=200)),
                ("phone", models.CharField(help_text="Customer's phone number", max_length=20)),
                (
                    "email",
                    models.EmailField(
                        blank=True, help_text="Customer's email address", max_length=254, null=True
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, help_text="When the customer was created"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, help_text="When the customer was last updated"),
                ),
                (
                    "tenant",
                    models.ForeignKey(
                        help_text="Tenant that owns this customer",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="customers",
                        to="core.tenant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Customer",
                "verbose_name_plural": "Customers",
                "db_table": "sales_customers",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["tenant", "phone"], name="cust_tenant_phone_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the invoice",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "invoice_number",
                    models.CharField(
                        help_text="Sequential invoice number, unique within the tenant",
                        max_length=50,
                    ),
                ),
                (
                    "rate",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Commodity rate per gram used to price this invoice",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "tax_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Tax rate applied, in percent",
                        max_digits=5,
                    ),
                ),
                (
                    "discount_type",
                    models.CharField(
                        choices=[
                            ("none", "No discount"),
                            ("percentage", "Percentage of subtotal"),
                            ("fixed", "Fixed amount"),
                        ],
                        default="none",
                        help_text="Kind of discount applied",
                        max_length=20,
                    ),
                ),
                (
                    "discount_value",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Discount value as entered (percent or amount)",
                        max_digits=12,
                    ),
                ),
                (
                    "commodity_value_total",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Sum of commodity (metal) value over all lines",
                        max_digits=14,
                    ),
                ),
                (
                    "making_charge_total",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Sum of making charges over all lines",
                        max_digits=14,
                    ),
                ),
                (
                    "subtotal",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Commodity value plus making charges",
                        max_digits=14,
                    ),
                ),
                (
                    "discount_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Discount amount deducted from the subtotal",
                        max_digits=14,
                    ),
                ),
                (
                    "tax_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Tax on the taxable amount",
                        max_digits=14,
                    ),
                ),
                (
                    "grand_total",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Taxable amount plus tax",
                        max_digits=14,
                    ),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[("PROVISIONAL", "Provisional"), ("FINALIZED", "Finalized")],
                        default="PROVISIONAL",
                        help_text="Invoice lifecycle status",
                        max_length=50,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, help_text="When the invoice was created"),
                ),
                (
                    "finalized_at",
                    models.DateTimeField(
                        blank=True, help_text="When the invoice was finalized", null=True
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        help_text="Customer the invoice was issued to (optional)",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="sales.customer",
                    ),
                ),
                (
                    "tenant",
                    models.ForeignKey(
                        help_text="Tenant that owns this invoice",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invoices",
                        to="core.tenant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice",
                "verbose_name_plural": "Invoices",
                "db_table": "invoices",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "-created_at"], name="invoice_tenant_date_idx"),
                    models.Index(fields=["tenant", "status"], name="invoice_tenant_status_idx"),
                    models.Index(fields=["customer", "-created_at"], name="invoice_cust_date_idx"),
                ],
                "unique_together": {("tenant", "invoice_number")},
            },
        ),
        migrations.CreateModel(
            name="InvoiceLine",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the invoice line",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "position",
                    models.PositiveIntegerField(
                        default=0, help_text="Order of the line within the invoice"
                    ),
                ),
                (
                    "quantity",
                    models.IntegerField(
                        help_text="Units sold",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "weight",
                    models.DecimalField(
                        decimal_places=3,
                        help_text="Weight in grams used for pricing one unit",
                        max_digits=10,
                    ),
                ),
                (
                    "commodity_value",
                    models.DecimalField(
                        decimal_places=2, help_text="Metal value of one unit", max_digits=14
                    ),
                ),
                (
                    "making_charge",
                    models.DecimalField(
                        decimal_places=2, help_text="Making charge of one unit", max_digits=14
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Price of one unit (commodity value + making charge)",
                        max_digits=14,
                    ),
                ),
                (
                    "inventory_item",
                    models.ForeignKey(
                        help_text="Inventory item that was sold",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoice_lines",
                        to="inventory.inventoryitem",
                    ),
                ),
                (
                    "invoice",
                    models.ForeignKey(
                        help_text="Invoice that this line belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="sales.invoice",
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice Line",
                "verbose_name_plural": "Invoice Lines",
                "db_table": "invoice_lines",
                "ordering": ["position"],
                "indexes": [
                    models.Index(fields=["invoice"], name="invline_invoice_idx"),
                    models.Index(fields=["inventory_item"], name="invline_item_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceSequence",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "last_number",
                    models.PositiveIntegerField(
                        default=0, help_text="Numeric part of the last invoice number issued"
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tenant",
                    models.OneToOneField(
                        help_text="Tenant this counter belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invoice_sequence",
                        to="core.tenant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice Sequence",
                "verbose_name_plural": "Invoice Sequences",
                "db_table": "invoice_sequences",
            },
        ),
    ]
