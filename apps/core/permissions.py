"""
Permission classes for tenant-based access control.
"""

from rest_framework import permissions


class HasTenantAccess(permissions.BasePermission):
    """
    Permission class to ensure users can only access resources from their own tenant.
    """

    message = "Access denied. User must belong to a tenant."

    def has_permission(self, request, view):
        # Check if user is authenticated and has a tenant
        return request.user.is_authenticated and getattr(request.user, "tenant_id", None) is not None

    def has_object_permission(self, request, view, obj):
        # Check if the object belongs to the user's tenant
        if hasattr(obj, "tenant_id"):
            return obj.tenant_id == request.user.tenant_id
        return True


class CanManageInventory(permissions.BasePermission):
    """
    Write access to inventory is limited to shop owners and managers.

    Read-only requests pass for every tenant user.
    """

    message = "Access denied. Only tenant owners and managers can modify inventory."

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.is_authenticated and request.user.can_manage_inventory()
