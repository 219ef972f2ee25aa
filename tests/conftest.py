"""
Pytest configuration and fixtures for the jewellery POS backend.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def tenant():
    """
    Fixture for creating a test tenant.
    """
    from apps.core.models import Tenant

    return Tenant.objects.create(company_name="Test Jewelry Shop", slug="test-shop", status="ACTIVE")


@pytest.fixture
def other_tenant():
    """
    Fixture for a second tenant, used to check isolation.
    """
    from apps.core.models import Tenant

    return Tenant.objects.create(company_name="Other Jewelry Shop", slug="other-shop", status="ACTIVE")


@pytest.fixture
def store_settings(tenant):
    """
    Fixture for the tenant's store settings (3% tax, low stock at 5).
    """
    from apps.core.models import StoreSettings

    return StoreSettings.objects.create(
        tenant=tenant, tax_rate=Decimal("3.00"), low_stock_threshold=5
    )


@pytest.fixture
def tenant_user(tenant, django_user_model):
    """
    Fixture for creating a test tenant user.
    """
    return django_user_model.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
        tenant=tenant,
        role="TENANT_OWNER",
    )


@pytest.fixture
def employee_user(tenant, django_user_model):
    """
    Fixture for a shop employee (cannot manage inventory).
    """
    return django_user_model.objects.create_user(
        username="employee",
        email="employee@example.com",
        password="testpass123",
        tenant=tenant,
        role="TENANT_EMPLOYEE",
    )


@pytest.fixture
def authenticated_api_client(api_client, tenant_user):
    """
    Fixture for an API client authenticated as the tenant owner.
    """
    api_client.force_authenticate(user=tenant_user)
    return api_client


@pytest.fixture
def make_item(tenant):
    """
    Factory fixture for inventory items of the test tenant.

    Defaults give a 10 g 22K gold ring with a 10% making charge.
    """
    from apps.inventory.models import InventoryItem

    counter = {"n": 0}

    def _make_item(**kwargs):
        counter["n"] += 1
        defaults = {
            "tenant": tenant,
            "sku": f"SKU-{counter['n']:03d}",
            "name": f"Gold Ring {counter['n']}",
            "metal_type": InventoryItem.GOLD,
            "purity": "22K",
            "gross_weight": Decimal("10.500"),
            "net_weight": Decimal("10.000"),
            "making_charge": Decimal("10.00"),
            "making_charge_type": InventoryItem.CHARGE_PERCENTAGE,
            "quantity": 5,
        }
        defaults.update(kwargs)
        return InventoryItem.objects.create(**defaults)

    return _make_item


@pytest.fixture
def inventory_item(make_item):
    """
    Fixture for a single inventory item with 5 units in stock.
    """
    return make_item()


@pytest.fixture
def customer(tenant):
    """
    Fixture for a customer of the test tenant.
    """
    from apps.sales.models import Customer

    return Customer.objects.create(tenant=tenant, name="Asha Verma", phone="555-0101")
