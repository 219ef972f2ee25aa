"""
Views for invoicing.

- POST /invoices/ runs a checkout
- GET /invoices/ lists the tenant's invoices, newest first
- GET /invoices/<id>/ returns one invoice with its lines
"""

import logging

from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import HasTenantAccess

from .exceptions import CheckoutError
from .models import Invoice
from .serializers import (
    InvoiceCreateSerializer,
    InvoiceDetailSerializer,
    InvoiceListQuerySerializer,
    InvoiceListSerializer,
)
from .services import CheckoutService

logger = logging.getLogger(__name__)


def validation_error_response(errors):
    return Response(
        {"error": "ValidationError", "detail": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def invoice_list_create(request):
    """
    List invoices or create one through checkout.

    POST body:
    {
        "customer_id": "uuid" (optional),
        "items": [
            {"item_id": "uuid", "quantity": 1, "weight": "10.000" (optional)}
        ],
        "rate": "6000.00" (or "gold_rate"),
        "discount_type": "percentage|fixed" (optional, default: fixed),
        "discount_value": "5.00" (optional)
    }

    GET query parameters:
    - from: ISO date or datetime, inclusive
    - to: ISO date or datetime, inclusive
    - limit: Maximum number of invoices
    """
    if request.method == "POST":
        return _create_invoice(request)
    return _list_invoices(request)


def _list_invoices(request):
    params = {
        key: value
        for key, value in (
            ("from_", request.query_params.get("from")),
            ("to", request.query_params.get("to")),
            ("limit", request.query_params.get("limit")),
        )
        if value not in (None, "")
    }
    query = InvoiceListQuerySerializer(data=params)
    if not query.is_valid():
        return validation_error_response(query.errors)

    queryset = (
        Invoice.objects.filter(tenant=request.user.tenant, status=Invoice.FINALIZED)
        .select_related("customer")
        .order_by("-created_at")
    )
    bounds = query.validated_data
    if "from_" in bounds:
        queryset = queryset.filter(created_at__gte=bounds["from_"])
    if "to" in bounds:
        queryset = queryset.filter(created_at__lte=bounds["to"])
    if "limit" in bounds:
        queryset = queryset[: bounds["limit"]]

    serializer = InvoiceListSerializer(queryset, many=True)
    return Response({"results": serializer.data}, status=status.HTTP_200_OK)


def _create_invoice(request):
    serializer = InvoiceCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)

    data = serializer.validated_data
    service = CheckoutService(request.user.tenant)
    try:
        invoice = service.checkout(
            lines=data["items"],
            rate=data.get("rate"),
            customer_id=data.get("customer_id"),
            discount_type=data.get("discount_type"),
            discount_value=data.get("discount_value"),
        )
    except CheckoutError as e:
        if e.status_code >= 500:
            logger.error(f"Checkout failed: {str(e)}", exc_info=True)
        else:
            logger.info(f"Checkout rejected: {e.code}: {e.detail}")
        return Response(e.as_response_data(), status=e.status_code)

    invoice = (
        Invoice.objects.select_related("customer")
        .prefetch_related("lines__inventory_item")
        .get(pk=invoice.pk)
    )
    return Response(InvoiceDetailSerializer(invoice).data, status=status.HTTP_200_OK)


class InvoiceDetailView(generics.RetrieveAPIView):
    """Retrieve one invoice of the current tenant."""

    serializer_class = InvoiceDetailSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess]

    def get_queryset(self):
        return (
            Invoice.objects.filter(tenant=self.request.user.tenant)
            .select_related("customer")
            .prefetch_related("lines__inventory_item")
        )
