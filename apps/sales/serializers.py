"""
Serializers for the invoicing API.
"""

from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from rest_framework import serializers

from .models import Customer, Invoice, InvoiceLine
from .services import CartLine


class CartLineSerializer(serializers.Serializer):
    """One requested cart line."""

    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    weight = serializers.DecimalField(
        max_digits=14, decimal_places=6, required=False, allow_null=True
    )

    def validate_weight(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Weight must be greater than zero.")
        return value


class InvoiceCreateSerializer(serializers.Serializer):
    """
    Request shape for a checkout.

    Only the shape is checked here. Business rules (empty cart, rate,
    discount, stock) are enforced by CheckoutService so that direct callers
    get the same errors as the API.
    """

    customer_id = serializers.UUIDField(required=False, allow_null=True)
    items = CartLineSerializer(many=True, required=False)
    # Taken as text; CheckoutService.validate_rate reports every bad rate
    rate = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    gold_rate = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, write_only=True
    )
    discount_type = serializers.CharField(
        max_length=20, required=False, allow_null=True, allow_blank=True
    )
    discount_value = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )

    def validate(self, attrs):
        """Accept ``gold_rate`` as an alias of ``rate``."""
        gold_rate = attrs.pop("gold_rate", None)
        if attrs.get("rate") in (None, ""):
            attrs["rate"] = gold_rate
        attrs["items"] = [CartLine(**line) for line in attrs.get("items", [])]
        return attrs


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "name", "phone", "email"]


class InvoiceLineSerializer(serializers.ModelSerializer):
    """Serializer for invoice lines."""

    item_id = serializers.UUIDField(source="inventory_item_id", read_only=True)
    sku = serializers.CharField(source="inventory_item.sku", read_only=True)
    name = serializers.CharField(source="inventory_item.name", read_only=True)
    total = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = InvoiceLine
        fields = [
            "id",
            "item_id",
            "sku",
            "name",
            "quantity",
            "weight",
            "commodity_value",
            "making_charge",
            "price",
            "total",
        ]
        read_only_fields = fields


class InvoiceListSerializer(serializers.ModelSerializer):
    """Serializer for the invoice list."""

    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "customer_id",
            "customer_name",
            "subtotal",
            "discount_amount",
            "tax_amount",
            "grand_total",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class InvoiceDetailSerializer(serializers.ModelSerializer):
    """Serializer for a single invoice with its lines."""

    customer = CustomerSerializer(read_only=True)
    lines = InvoiceLineSerializer(many=True, read_only=True)
    taxable_amount = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "customer",
            "rate",
            "commodity_value_total",
            "making_charge_total",
            "subtotal",
            "discount_type",
            "discount_value",
            "discount_amount",
            "taxable_amount",
            "tax_rate",
            "tax_amount",
            "grand_total",
            "status",
            "created_at",
            "finalized_at",
            "lines",
        ]
        read_only_fields = fields


class InvoiceListQuerySerializer(serializers.Serializer):
    """Query parameters of the invoice list."""

    # ISO date or datetime; a bare date covers the whole day
    from_ = serializers.CharField(required=False)
    to = serializers.CharField(required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=1000)

    def _parse_bound(self, value, end_of_day):
        # parse_datetime() also accepts a bare date (as midnight), so dates go first
        try:
            day = parse_date(value)
            if day is not None:
                parsed = datetime.combine(day, time.max if end_of_day else time.min)
            else:
                parsed = parse_datetime(value)
                if parsed is None:
                    raise ValueError
        except ValueError:
            raise serializers.ValidationError("Enter an ISO 8601 date or datetime.")
        if timezone.is_naive(parsed):
            parsed = timezone.make_aware(parsed)
        return parsed

    def validate_from_(self, value):
        return self._parse_bound(value, end_of_day=False)

    def validate_to(self, value):
        return self._parse_bound(value, end_of_day=True)

    def validate(self, attrs):
        if "from_" in attrs and "to" in attrs and attrs["from_"] > attrs["to"]:
            raise serializers.ValidationError("'from' must not be after 'to'.")
        return attrs

