"""
API error responses.

Every error body has the shape ``{"error": "<ErrorClass>", "detail": ...}``.
"""

from django.core.exceptions import PermissionDenied
from django.http import Http404

from rest_framework import exceptions
from rest_framework.views import exception_handler


def api_exception_handler(exc, context):
    """DRF exception handler that adds the error class to the response body."""
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(*(exc.args))
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied(*(exc.args))

    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and "detail" in data and len(data) == 1:
        detail = data["detail"]
    else:
        detail = data
    response.data = {"error": type(exc).__name__, "detail": detail}
    return response
