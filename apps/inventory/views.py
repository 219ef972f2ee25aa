"""
Views for inventory management.

- Item list with search and filters, item create
- Item retrieve, update and (soft) delete
- Stock summary by metal type with low-stock and out-of-stock counts
"""

import logging

from django.db import transaction
from django.db.models import Count, Q, Sum

from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.models import StoreSettings
from apps.core.permissions import CanManageInventory, HasTenantAccess

from .models import InventoryItem
from .serializers import InventoryItemSerializer

logger = logging.getLogger(__name__)

TRUTHY = ["true", "1", "yes"]


class TenantItemQuerysetMixin:
    """Restrict every lookup to the current user's tenant."""

    serializer_class = InventoryItemSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess, CanManageInventory]

    def get_queryset(self):
        return InventoryItem.objects.filter(tenant=self.request.user.tenant)


class InventoryItemListCreateView(TenantItemQuerysetMixin, generics.ListCreateAPIView):
    """
    API endpoint for listing and creating inventory items.

    Supports:
    - Search by SKU or name
    - Filter by metal_type, is_active, low_stock, out_of_stock
    """

    def get_queryset(self):
        queryset = super().get_queryset().order_by("-created_at")

        search = self.request.query_params.get("search", None)
        if search:
            queryset = queryset.filter(Q(sku__icontains=search) | Q(name__icontains=search))

        metal_type = self.request.query_params.get("metal_type", None)
        if metal_type:
            queryset = queryset.filter(metal_type=metal_type.upper())

        is_active = self.request.query_params.get("is_active", None)
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() in TRUTHY)

        low_stock = self.request.query_params.get("low_stock", None)
        if low_stock and low_stock.lower() in TRUTHY:
            threshold = StoreSettings.for_tenant(self.request.user.tenant).low_stock_threshold
            queryset = queryset.filter(quantity__gt=0, quantity__lte=threshold)

        out_of_stock = self.request.query_params.get("out_of_stock", None)
        if out_of_stock and out_of_stock.lower() in TRUTHY:
            queryset = queryset.filter(quantity=0)

        return queryset

    def perform_create(self, serializer):
        """Set tenant from current user."""
        item = serializer.save(tenant=self.request.user.tenant)
        logger.info(f"Created inventory item {item.sku} for tenant {item.tenant_id}")


class InventoryItemDetailView(TenantItemQuerysetMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for a single inventory item.

    Updates lock the row so they cannot interleave with a checkout's stock
    decrement. Deletes are soft: the item is deactivated so invoice lines
    keep their reference.
    """

    def update(self, request, *args, **kwargs):
        with transaction.atomic():
            return super().update(request, *args, **kwargs)

    def get_object(self):
        if self.request.method in ("PUT", "PATCH"):
            queryset = self.get_queryset().select_for_update()
            item = generics.get_object_or_404(queryset, pk=self.kwargs["pk"])
            self.check_object_permissions(self.request, item)
            return item
        return super().get_object()

    def perform_destroy(self, instance):
        """Soft delete by setting is_active to False."""
        instance.is_active = False
        instance.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Deactivated inventory item {instance.sku} for tenant {instance.tenant_id}")


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def stock_summary(request):
    """
    Stock summary for the current tenant.

    Returns quantity totals per metal type, the number of items at or below
    the low-stock threshold (but not out of stock) and the number of items
    out of stock. Only active items are counted.
    """
    tenant = request.user.tenant
    threshold = StoreSettings.for_tenant(tenant).low_stock_threshold
    items = InventoryItem.objects.filter(tenant=tenant, is_active=True)

    by_metal = {
        row["metal_type"]: {
            "items": row["items"],
            "quantity": row["total_quantity"] or 0,
            "net_weight": row["total_net_weight"] or 0,
        }
        for row in items.values("metal_type").annotate(
            items=Count("id"),
            total_quantity=Sum("quantity"),
            total_net_weight=Sum("net_weight"),
        )
    }
    counts = items.aggregate(
        total_items=Count("id"),
        total_quantity=Sum("quantity"),
        low_stock=Count("id", filter=Q(quantity__gt=0, quantity__lte=threshold)),
        out_of_stock=Count("id", filter=Q(quantity=0)),
    )

    return Response(
        {
            "total_items": counts["total_items"],
            "total_quantity": counts["total_quantity"] or 0,
            "by_metal_type": {
                metal: by_metal.get(metal, {"items": 0, "quantity": 0, "net_weight": 0})
                for metal, _label in InventoryItem.METAL_TYPE_CHOICES
            },
            "low_stock_threshold": threshold,
            "low_stock_count": counts["low_stock"],
            "out_of_stock_count": counts["out_of_stock"],
        },
        status=status.HTTP_200_OK,
    )
