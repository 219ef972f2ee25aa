"""
Tests for the invoicing API.

- POST /invoices/ runs a checkout and returns the finalized invoice
- GET /invoices/ lists finalized invoices, newest first
- GET /invoices/<id>/ returns one invoice of the caller's tenant
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone

import pytest
from rest_framework import status

from apps.inventory.models import InventoryItem
from apps.sales.models import Invoice
from apps.sales.services import CartLine, CheckoutService


def checkout_payload(item, quantity=1, **extra):
    payload = {
        "items": [{"item_id": str(item.id), "quantity": quantity}],
        "rate": "6000.00",
    }
    payload.update(extra)
    return payload


@pytest.mark.django_db
class TestCreateInvoice:
    """Test POST /invoices/."""

    def test_create_invoice(self, authenticated_api_client, store_settings, inventory_item, customer):
        url = reverse("sales:invoice_list_create")
        payload = checkout_payload(
            inventory_item,
            customer_id=str(customer.id),
            discount_type="percentage",
            discount_value="5",
        )

        response = authenticated_api_client.post(url, payload, format="json")

        assert response.status_code == status.HTTP_200_OK
        data = response.data
        assert data["invoice_number"] == "INV-001"
        assert data["status"] == Invoice.FINALIZED
        assert data["customer"]["name"] == "Asha Verma"
        assert data["subtotal"] == "66000.00"
        assert data["discount_amount"] == "3300.00"
        assert data["taxable_amount"] == "62700.00"
        assert data["tax_amount"] == "1881.00"
        assert data["grand_total"] == "64581.00"
        assert len(data["lines"]) == 1
        assert data["lines"][0]["sku"] == inventory_item.sku
        assert data["lines"][0]["price"] == "66000.00"

        inventory_item.refresh_from_db()
        assert inventory_item.quantity == 4

    def test_gold_rate_alias(self, authenticated_api_client, store_settings, inventory_item):
        url = reverse("sales:invoice_list_create")
        payload = {
            "items": [{"item_id": str(inventory_item.id), "quantity": 1}],
            "gold_rate": "6000",
        }

        response = authenticated_api_client.post(url, payload, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["rate"] == "6000.000000"
        assert response.data["commodity_value_total"] == "60000.00"

    def test_weight_override(self, authenticated_api_client, store_settings, inventory_item):
        url = reverse("sales:invoice_list_create")
        payload = {
            "items": [{"item_id": str(inventory_item.id), "quantity": 1, "weight": "5.000"}],
            "rate": "6000",
        }

        response = authenticated_api_client.post(url, payload, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["lines"][0]["weight"] == "5.000000"
        assert response.data["lines"][0]["commodity_value"] == "30000.00"

    def test_empty_cart(self, authenticated_api_client):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(url, {"items": [], "rate": "6000"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "EmptyCartError"

    def test_missing_rate(self, authenticated_api_client, inventory_item):
        url = reverse("sales:invoice_list_create")
        payload = {"items": [{"item_id": str(inventory_item.id), "quantity": 1}]}

        response = authenticated_api_client.post(url, payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "InvalidRateError"

    def test_zero_rate(self, authenticated_api_client, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, rate="0"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "InvalidRateError"

    def test_rate_with_three_decimals(self, authenticated_api_client, store_settings, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, rate="6000.125"), format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["rate"] == "6000.125000"
        assert response.data["commodity_value_total"] == "60001.25"
        assert response.data["making_charge_total"] == "6000.13"
        assert response.data["subtotal"] == "66001.38"

    def test_small_positive_rate(self, authenticated_api_client, store_settings, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, rate="0.001"), format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["commodity_value_total"] == "0.01"

    def test_numeric_json_rate(self, authenticated_api_client, store_settings, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, rate=6000.5), format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["commodity_value_total"] == "60005.00"

    @pytest.mark.parametrize("rate", ["abc", "6000.1234567", "-5"])
    def test_bad_rate_is_invalid_rate_error(self, authenticated_api_client, inventory_item, rate):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, rate=rate), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "InvalidRateError"
        assert Invoice.objects.count() == 0

    def test_malformed_line(self, authenticated_api_client, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, quantity=0), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "ValidationError"
        assert "items" in response.data["detail"]

    def test_unknown_item(self, authenticated_api_client, store_settings):
        url = reverse("sales:invoice_list_create")
        payload = {"items": [{"item_id": str(uuid.uuid4()), "quantity": 1}], "rate": "6000"}

        response = authenticated_api_client.post(url, payload, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"] == "ItemNotFoundError"

    def test_unknown_customer(self, authenticated_api_client, store_settings, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, customer_id=str(uuid.uuid4())), format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"] == "CustomerNotFoundError"

    def test_insufficient_stock(self, authenticated_api_client, store_settings, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, quantity=6), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "InsufficientStockError"
        assert inventory_item.sku in response.data["detail"]
        assert Invoice.objects.count() == 0

    def test_negative_discount(self, authenticated_api_client, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = authenticated_api_client.post(
            url, checkout_payload(inventory_item, discount_value="-10"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "InvalidDiscountError"

    def test_requires_authentication(self, api_client, inventory_item):
        url = reverse("sales:invoice_list_create")

        response = api_client.post(url, checkout_payload(inventory_item), format="json")

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)
        assert Invoice.objects.count() == 0

    def test_user_without_tenant_is_refused(self, api_client, django_user_model, inventory_item):
        admin = django_user_model.objects.create_user(
            username="platform", password="testpass123", role="PLATFORM_ADMIN"
        )
        api_client.force_authenticate(user=admin)

        response = api_client.post(
            reverse("sales:invoice_list_create"), checkout_payload(inventory_item), format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error"] == "PermissionDenied"


@pytest.mark.django_db
class TestListInvoices:
    """Test GET /invoices/."""

    @pytest.fixture
    def invoices(self, tenant, store_settings, make_item):
        """Three invoices created on 1, 2 and 3 March 2025 at noon."""
        item = make_item(quantity=10)
        service = CheckoutService(tenant)
        created = []
        for day in (1, 2, 3):
            invoice = service.checkout(
                lines=[CartLine(item_id=item.id, quantity=1)], rate=Decimal("6000")
            )
            stamp = timezone.make_aware(datetime(2025, 3, day, 12, 0))
            Invoice.objects.filter(pk=invoice.pk).update(created_at=stamp)
            created.append(invoice)
        return created

    def test_newest_first(self, authenticated_api_client, invoices):
        response = authenticated_api_client.get(reverse("sales:invoice_list_create"))

        assert response.status_code == status.HTTP_200_OK
        numbers = [row["invoice_number"] for row in response.data["results"]]
        assert numbers == ["INV-003", "INV-002", "INV-001"]

    def test_limit(self, authenticated_api_client, invoices):
        response = authenticated_api_client.get(
            reverse("sales:invoice_list_create"), {"limit": 2}
        )

        assert response.status_code == status.HTTP_200_OK
        numbers = [row["invoice_number"] for row in response.data["results"]]
        assert numbers == ["INV-003", "INV-002"]

    def test_date_range_is_inclusive(self, authenticated_api_client, invoices):
        response = authenticated_api_client.get(
            reverse("sales:invoice_list_create"), {"from": "2025-03-02", "to": "2025-03-03"}
        )

        assert response.status_code == status.HTTP_200_OK
        numbers = [row["invoice_number"] for row in response.data["results"]]
        assert numbers == ["INV-003", "INV-002"]

    def test_date_upper_bound_covers_whole_day(self, authenticated_api_client, invoices):
        response = authenticated_api_client.get(
            reverse("sales:invoice_list_create"), {"to": "2025-03-02"}
        )

        assert response.status_code == status.HTTP_200_OK
        numbers = [row["invoice_number"] for row in response.data["results"]]
        assert numbers == ["INV-002", "INV-001"]

    def test_datetime_bound(self, authenticated_api_client, invoices):
        start = timezone.make_aware(datetime(2025, 3, 2, 12, 0)) + timedelta(seconds=1)

        response = authenticated_api_client.get(
            reverse("sales:invoice_list_create"), {"from": start.isoformat()}
        )

        numbers = [row["invoice_number"] for row in response.data["results"]]
        assert numbers == ["INV-003"]

    def test_invalid_date(self, authenticated_api_client):
        response = authenticated_api_client.get(
            reverse("sales:invoice_list_create"), {"from": "yesterday"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "ValidationError"

    def test_reversed_range(self, authenticated_api_client):
        response = authenticated_api_client.get(
            reverse("sales:invoice_list_create"), {"from": "2025-03-03", "to": "2025-03-01"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_limit(self, authenticated_api_client):
        response = authenticated_api_client.get(
            reverse("sales:invoice_list_create"), {"limit": 0}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_only_own_tenant(self, authenticated_api_client, other_tenant, invoices):
        Invoice.objects.create(
            tenant=other_tenant,
            invoice_number="INV-001",
            rate=Decimal("6000"),
            status=Invoice.FINALIZED,
        )

        response = authenticated_api_client.get(reverse("sales:invoice_list_create"))

        assert len(response.data["results"]) == 3

    def test_provisional_invoices_are_hidden(self, authenticated_api_client, tenant):
        Invoice.objects.create(tenant=tenant, invoice_number="INV-900", rate=Decimal("6000"))

        response = authenticated_api_client.get(reverse("sales:invoice_list_create"))

        assert response.data["results"] == []


@pytest.mark.django_db
class TestInvoiceDetail:
    """Test GET /invoices/<id>/."""

    def test_retrieve(self, authenticated_api_client, tenant, store_settings, make_item):
        first = make_item()
        second = make_item(making_charge=Decimal("250.00"), making_charge_type=InventoryItem.CHARGE_FIXED)
        invoice = CheckoutService(tenant).checkout(
            lines=[CartLine(item_id=first.id, quantity=1), CartLine(item_id=second.id, quantity=2)],
            rate=Decimal("6000"),
        )

        response = authenticated_api_client.get(
            reverse("sales:invoice_detail", kwargs={"pk": invoice.pk})
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["invoice_number"] == invoice.invoice_number
        assert [line["sku"] for line in response.data["lines"]] == [first.sku, second.sku]
        assert response.data["lines"][1]["making_charge"] == "2500.00"
        assert response.data["lines"][1]["total"] == "125000.00"

    def test_other_tenant_invoice_not_found(self, authenticated_api_client, other_tenant):
        invoice = Invoice.objects.create(
            tenant=other_tenant, invoice_number="INV-001", rate=Decimal("6000")
        )

        response = authenticated_api_client.get(
            reverse("sales:invoice_detail", kwargs={"pk": invoice.pk})
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"] == "NotFound"
