from .order import (
    AdminOrderSerializer,
    BuyNowInputSerializer,
    CancelOrderInputSerializer,
    CreateOrderInputSerializer,
    OrderItemSerializer,
    OrderSerializer,
    UpdateOrderStatusInputSerializer,
    VerifyOTPInputSerializer,
)
from .payment import (
    PaymentSerializer,
    ReviewPaymentInputSerializer,
    SubmitReceiptInputSerializer,
)

__all__ = [
    "AdminOrderSerializer",
    "BuyNowInputSerializer",
    "CancelOrderInputSerializer",
    "CreateOrderInputSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "UpdateOrderStatusInputSerializer",
    "VerifyOTPInputSerializer",
    "PaymentSerializer",
    "ReviewPaymentInputSerializer",
    "SubmitReceiptInputSerializer",
]
