# orders/services/order_service.py

"""
ORDER SERVICE (APPLICATION LAYER)

Purpose:
- Place orders (from the cart, or buy-now for a single product).
- Apply lifecycle transitions: cancel, mark ready, confirm (payment path),
  collect (OTP path), delete.

Hard rules:
- Every mutation runs in one transaction and locks the order row with
  select_for_update(), so two admins acting on the same order serialise.
- Transition legality is decided by orders.services.order_lifecycle only.
- Stock is reserved when the order is placed and released on cancel.
- Money is computed server-side from current product prices.
"""

from __future__ import annotations

import logging
from datetime import date, time

from django.db import transaction
from django.utils import timezone

from cart.models import CartItem
from cart.services.cart_service import get_active_cart
from core.money import money
from notifications.models import Notification
from notifications.services import notify, pickup_data
from orders.models import Order, OrderItem, Payment
from orders.services.order_lifecycle import (
    ACTOR_ADMIN,
    ACTOR_BUYER,
    ACTOR_OTP,
    ACTOR_PAYMENT,
    ADMIN_SETTABLE_STATUSES,
    InvalidOrderTransitionError,
    InvalidOTPError,
    validate_deletable,
    validate_transition,
)
from orders.services.otp import generate_otp, is_valid_otp_format, otp_length, otp_matches
from products.services.stock import (
    InsufficientStockError,
    lock_products,
    release_stock,
    reserve_stock,
)
from store.models import Store

logger = logging.getLogger(__name__)


# ============================================================
# DOMAIN ERRORS
# ============================================================

class CheckoutError(Exception):
    """Base checkout exception"""


class EmptyCartError(CheckoutError):
    pass


class StockValidationError(CheckoutError):
    pass


# ============================================================
# HELPERS
# ============================================================

def _lock_order(order_id, *, user=None) -> Order:
    """
    Lock and return the order. When `user` is given the order must belong to
    them; otherwise Order.DoesNotExist is raised (404, not 403).
    """
    qs = Order.objects.select_for_update().filter(id=order_id)
    if user is not None:
        qs = qs.filter(user=user)
    return qs.get()


def _log_transition(order: Order, *, from_status: str, actor: str):
    logger.info(
        "Order transition",
        extra={
            "order_id": str(order.id),
            "order_number": order.order_number,
            "from_status": from_status,
            "to_status": order.status,
            "actor": actor,
        },
    )


def _validate(order: Order, *, target_status: str, actor: str):
    try:
        validate_transition(order=order, target_status=target_status, actor=actor)
    except InvalidOrderTransitionError:
        logger.warning(
            "Rejected order transition",
            extra={
                "order_id": str(order.id),
                "from_status": order.status,
                "to_status": target_status,
                "actor": actor,
            },
        )
        raise


# ============================================================
# PLACEMENT
# ============================================================

def _place_order(
    *,
    user,
    store: Store,
    lines: list[tuple[str, int]],
    pickup_date: date,
    pickup_time: time,
    notes: str,
) -> Order:
    """
    lines: [(product_id, quantity)]. Caller holds the transaction.
    """
    if not lines:
        raise EmptyCartError("No items to order for this store")

    products = lock_products(pid for pid, _ in lines)

    reserved = []
    for product_id, quantity in lines:
        product = products.get(str(product_id))
        if product is None or not product.is_active:
            raise CheckoutError("A product in your order is no longer available")
        if product.store_id != store.id:
            raise CheckoutError(f"{product.name} is not sold at {store.name}")
        if int(quantity) < 1:
            raise StockValidationError(f"Invalid quantity for {product.name}")
        reserved.append((product, int(quantity)))

    try:
        reserve_stock(reserved)
    except InsufficientStockError as exc:
        raise StockValidationError(str(exc)) from exc

    order = Order.objects.create(
        user=user,
        store=store,
        pickup_date=pickup_date,
        pickup_time=pickup_time,
        notes=(notes or "").strip(),
    )

    total = money(0)
    for product, quantity in reserved:
        unit_price = money(product.price)
        subtotal = money(unit_price * quantity)
        OrderItem.objects.create(
            order=order,
            product=product,
            product_name=product.name,
            quantity=quantity,
            unit_price=unit_price,
            subtotal=subtotal,
        )
        total += subtotal

    order.total_amount = money(total)
    order.save(update_fields=["total_amount", "updated_at"])

    notify(
        user=user,
        notification_type=Notification.TYPE_ORDER_CREATED,
        title="Order placed",
        message=(
            f"Your order {order.order_number} has been placed. "
            "Submit your payment receipt so we can confirm it."
        ),
        order=order,
        data=pickup_data(order),
    )

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.id),
            "order_number": order.order_number,
            "store_id": str(store.id),
            "total_amount": str(order.total_amount),
            "lines": len(reserved),
        },
    )
    return order


@transaction.atomic
def create_order_from_cart(
    *, user, store_id, pickup_date: date, pickup_time: time, notes: str = ""
) -> Order:
    """
    Order the cart lines that belong to `store_id`. Those lines are removed
    from the cart; lines from other stores stay.
    """
    store = Store.objects.filter(id=store_id, is_active=True).first()
    if store is None:
        raise CheckoutError("Store not found")

    cart = get_active_cart(user=user)
    cart_items = list(
        CartItem.objects.select_for_update()
        .filter(cart=cart, product__store=store)
        .order_by("created_at")
    )
    if not cart_items:
        raise EmptyCartError("Your cart has no items from this store")

    order = _place_order(
        user=user,
        store=store,
        lines=[(str(i.product_id), i.quantity) for i in cart_items],
        pickup_date=pickup_date,
        pickup_time=pickup_time,
        notes=notes,
    )

    CartItem.objects.filter(id__in=[i.id for i in cart_items]).delete()
    return order


@transaction.atomic
def buy_now(
    *,
    user,
    product_id,
    quantity: int,
    store_id,
    pickup_date: date,
    pickup_time: time,
    notes: str = "",
) -> Order:
    """
    Single-product order that bypasses (and leaves untouched) the cart.
    """
    store = Store.objects.filter(id=store_id, is_active=True).first()
    if store is None:
        raise CheckoutError("Store not found")

    return _place_order(
        user=user,
        store=store,
        lines=[(str(product_id), int(quantity))],
        pickup_date=pickup_date,
        pickup_time=pickup_time,
        notes=notes,
    )


# ============================================================
# TRANSITIONS
# ============================================================

def _cancel_locked(order: Order, *, actor: str, reason: str) -> Order:
    _validate(order, target_status=Order.STATUS_CANCELLED, actor=actor)

    from_status = order.status
    release_stock([(item.product_id, item.quantity) for item in order.items.all()])

    # A receipt still awaiting review cannot confirm a cancelled order.
    order.payments.filter(status=Payment.STATUS_PENDING).update(
        status=Payment.STATUS_REJECTED,
        verification_notes="Order cancelled",
        verified_at=timezone.now(),
    )

    order.status = Order.STATUS_CANCELLED
    order.cancel_reason = (reason or "").strip()
    order.cancelled_at = timezone.now()
    order.save(update_fields=["status", "cancel_reason", "cancelled_at", "updated_at"])

    _log_transition(order, from_status=from_status, actor=actor)

    by = "You cancelled" if actor == ACTOR_BUYER else "The store cancelled"
    notify(
        user=order.user,
        notification_type=Notification.TYPE_ORDER_CANCELLED,
        title="Order cancelled",
        message=f"{by} order {order.order_number}."
        + (f" Reason: {order.cancel_reason}" if order.cancel_reason else ""),
        order=order,
        data=pickup_data(order),
    )
    return order


@transaction.atomic
def cancel_order(*, order_id, actor: str, user=None, reason: str = "") -> Order:
    """
    Buyer cancel: pass actor=ACTOR_BUYER and the buyer as `user`.
    Admin cancel: actor=ACTOR_ADMIN, no ownership check.
    """
    order = _lock_order(order_id, user=user if actor == ACTOR_BUYER else None)
    return _cancel_locked(order, actor=actor, reason=reason)


def _mark_ready_locked(order: Order) -> Order:
    _validate(order, target_status=Order.STATUS_READY_FOR_COLLECTION, actor=ACTOR_ADMIN)

    from_status = order.status
    order.status = Order.STATUS_READY_FOR_COLLECTION
    order.ready_at = timezone.now()
    order.save(update_fields=["status", "ready_at", "updated_at"])

    _log_transition(order, from_status=from_status, actor=ACTOR_ADMIN)

    notify(
        user=order.user,
        notification_type=Notification.TYPE_READY_FOR_COLLECTION,
        title="Ready for collection",
        message=(
            f"Order {order.order_number} is ready at {order.store.name}. "
            "Show your pickup code at the counter."
        ),
        order=order,
        data=pickup_data(order, include_otp=True),
    )
    return order


@transaction.atomic
def update_order_status(*, order_id, target_status: str, reason: str = "") -> Order:
    """
    Admin status endpoint. Only READY_FOR_COLLECTION and CANCELLED can be
    requested here; CONFIRMED comes from payment verification and COLLECTED
    from OTP verification.
    """
    if target_status not in ADMIN_SETTABLE_STATUSES:
        logger.warning(
            "Rejected admin status request",
            extra={"order_id": str(order_id), "to_status": target_status},
        )
        raise InvalidOrderTransitionError(
            f"Status '{target_status}' cannot be set directly"
        )

    order = _lock_order(order_id)

    if target_status == Order.STATUS_CANCELLED:
        return _cancel_locked(order, actor=ACTOR_ADMIN, reason=reason)
    return _mark_ready_locked(order)


def confirm_order_for_payment(order: Order) -> Order:
    """
    PENDING -> CONFIRMED on payment verification; issues the pickup OTP.
    The caller (payment_service) holds the transaction and the order lock.
    """
    _validate(order, target_status=Order.STATUS_CONFIRMED, actor=ACTOR_PAYMENT)

    from_status = order.status
    now = timezone.now()
    order.status = Order.STATUS_CONFIRMED
    order.payment_status = Order.PAYMENT_VERIFIED
    order.confirmed_at = now
    order.otp = generate_otp()
    order.otp_issued_at = now
    order.save(
        update_fields=[
            "status",
            "payment_status",
            "confirmed_at",
            "otp",
            "otp_issued_at",
            "updated_at",
        ]
    )

    _log_transition(order, from_status=from_status, actor=ACTOR_PAYMENT)

    notify(
        user=order.user,
        notification_type=Notification.TYPE_ORDER_CONFIRMED,
        title="Order confirmed",
        message=(
            f"Order {order.order_number} is confirmed. Your pickup code is "
            f"{order.otp}; present it when you collect."
        ),
        order=order,
        data=pickup_data(order, include_otp=True),
    )
    return order


@transaction.atomic
def verify_pickup_otp(*, order_id, otp) -> Order:
    """
    READY_FOR_COLLECTION -> COLLECTED when `otp` matches the issued code.
    On mismatch the order is left unchanged and InvalidOTPError is raised.
    """
    submitted = (otp or "").strip() if isinstance(otp, str) else otp
    if not is_valid_otp_format(submitted):
        raise InvalidOTPError(f"OTP must be exactly {otp_length()} digits")

    order = _lock_order(order_id)
    _validate(order, target_status=Order.STATUS_COLLECTED, actor=ACTOR_OTP)

    if not otp_matches(expected=order.otp, submitted=submitted):
        logger.warning(
            "Pickup OTP mismatch",
            extra={"order_id": str(order.id), "order_number": order.order_number},
        )
        raise InvalidOTPError("Invalid OTP")

    from_status = order.status
    order.status = Order.STATUS_COLLECTED
    order.collected_at = timezone.now()
    order.save(update_fields=["status", "collected_at", "updated_at"])

    _log_transition(order, from_status=from_status, actor=ACTOR_OTP)

    notify(
        user=order.user,
        notification_type=Notification.TYPE_ORDER_COLLECTED,
        title="Order collected",
        message=f"Order {order.order_number} has been collected. Thank you!",
        order=order,
        data=pickup_data(order),
    )
    return order


@transaction.atomic
def delete_order(*, order_id) -> None:
    order = _lock_order(order_id)
    validate_deletable(order=order)

    order_number = order.order_number
    order.delete()

    logger.info("Order deleted", extra={"order_id": str(order_id), "order_number": order_number})
