"""
Checkout exceptions.

Each exception carries the HTTP status the API answers with and a stable
error code (the class name) used in the ``{"error": ..., "detail": ...}``
response body.
"""

from rest_framework import status


class CheckoutError(Exception):
    """Base class for checkout failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail()
        super().__init__(self.detail)

    @property
    def code(self):
        return type(self).__name__

    def default_detail(self):
        return "Checkout failed"

    def as_response_data(self):
        return {"error": self.code, "detail": self.detail}


class InvalidStateTransition(CheckoutError):
    """A checkout attempt was moved along an edge its state machine lacks."""


class CheckoutValidationError(CheckoutError):
    status_code = status.HTTP_400_BAD_REQUEST

    def default_detail(self):
        return "Invalid checkout request"


class EmptyCartError(CheckoutValidationError):
    def default_detail(self):
        return "Cart is empty"


class InvalidRateError(CheckoutValidationError):
    def default_detail(self):
        return "Commodity rate must be greater than zero"


class InvalidDiscountError(CheckoutValidationError):
    def default_detail(self):
        return "Invalid discount"


class InvalidItemConfigError(CheckoutValidationError):
    def default_detail(self):
        return "Item cannot be priced with its current configuration"


class NotFoundError(CheckoutError):
    status_code = status.HTTP_404_NOT_FOUND

    def default_detail(self):
        return "Not found"


class ItemNotFoundError(NotFoundError):
    def __init__(self, item_id, detail=None):
        self.item_id = item_id
        super().__init__(detail or f"Inventory item {item_id} not found")


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id, detail=None):
        self.customer_id = customer_id
        super().__init__(detail or f"Customer {customer_id} not found")


class InsufficientStockError(CheckoutError):
    """Requested quantity exceeds what the item has on hand."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, item, requested, detail=None):
        self.item = item
        self.requested = requested
        super().__init__(
            detail
            or f"Insufficient stock for {item.name} ({item.sku}): "
            f"requested {requested}, available {item.quantity}"
        )


class ConcurrencyConflictError(CheckoutError):
    """Stock row changed between read and write."""

    status_code = status.HTTP_409_CONFLICT

    def default_detail(self):
        return "Inventory changed during checkout, please retry"


class InternalError(CheckoutError):
    def default_detail(self):
        return "Checkout failed due to an internal error"
