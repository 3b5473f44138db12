# orders/views/errors.py

"""
Maps order/payment domain errors to enveloped API errors.
"""

import uuid

from rest_framework import status

from core.responses import error_response
from orders.services.order_lifecycle import (
    InvalidOrderTransitionError,
    InvalidOTPError,
    OrderNotDeletableError,
)
from orders.services.order_service import (
    CheckoutError,
    EmptyCartError,
    StockValidationError,
)
from orders.services.payment_service import (
    PaymentAlreadyProcessedError,
    PaymentNotAllowedError,
    RejectionNotesRequiredError,
)

# Most specific classes first.
DOMAIN_ERRORS = [
    (InvalidOrderTransitionError, "INVALID_TRANSITION", status.HTTP_409_CONFLICT),
    (InvalidOTPError, "INVALID_OTP", status.HTTP_400_BAD_REQUEST),
    (OrderNotDeletableError, "ORDER_NOT_DELETABLE", status.HTTP_409_CONFLICT),
    (PaymentAlreadyProcessedError, "PAYMENT_ALREADY_PROCESSED", status.HTTP_409_CONFLICT),
    (RejectionNotesRequiredError, "REJECTION_NOTES_REQUIRED", status.HTTP_400_BAD_REQUEST),
    (PaymentNotAllowedError, "PAYMENT_NOT_ALLOWED", status.HTTP_409_CONFLICT),
    (EmptyCartError, "EMPTY_CART", status.HTTP_400_BAD_REQUEST),
    (StockValidationError, "INSUFFICIENT_STOCK", status.HTTP_400_BAD_REQUEST),
    (CheckoutError, "CHECKOUT_FAILED", status.HTTP_400_BAD_REQUEST),
]

HANDLED_ERRORS = tuple(cls for cls, _, _ in DOMAIN_ERRORS)


def domain_error_response(exc):
    for cls, code, http_status in DOMAIN_ERRORS:
        if isinstance(exc, cls):
            return error_response(code=code, message=str(exc), http_status=http_status)
    raise exc


def not_found(message: str = "Order not found"):
    return error_response(
        code="NOT_FOUND", message=message, http_status=status.HTTP_404_NOT_FOUND
    )


def parse_id(value):
    """
    UUID from a URL segment, or None. Callers answer None with not_found()
    so a malformed id reads the same as an unknown one.
    """
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None
