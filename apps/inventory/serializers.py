"""
Serializers for inventory app.
"""

from rest_framework import serializers

from .models import InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    """
    Serializer for reading, creating and updating inventory items.

    ``version`` is read-only: it is maintained by the model and bumped on
    every stock write.
    """

    is_out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "sku",
            "name",
            "metal_type",
            "purity",
            "gross_weight",
            "net_weight",
            "making_charge",
            "making_charge_type",
            "quantity",
            "version",
            "is_out_of_stock",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "version", "created_at", "updated_at"]

    def validate_sku(self, value):
        """Validate SKU uniqueness within tenant."""
        request = self.context.get("request")
        tenant_id = request.user.tenant_id if request else None

        queryset = InventoryItem.objects.filter(tenant_id=tenant_id, sku=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)

        if queryset.exists():
            raise serializers.ValidationError(
                "An item with this SKU already exists for this tenant."
            )

        return value

    def validate(self, attrs):
        gross = attrs.get("gross_weight", getattr(self.instance, "gross_weight", None))
        net = attrs.get("net_weight", getattr(self.instance, "net_weight", None))
        if gross is not None and net is not None and net > gross:
            raise serializers.ValidationError(
                {"net_weight": "Net weight cannot exceed gross weight."}
            )
        return attrs
