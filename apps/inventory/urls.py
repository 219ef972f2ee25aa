"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("inventory/items/", views.InventoryItemListCreateView.as_view(), name="item_list"),
    path(
        "inventory/items/<uuid:pk>/",
        views.InventoryItemDetailView.as_view(),
        name="item_detail",
    ),
    path("inventory/stock-summary/", views.stock_summary, name="stock_summary"),
]
