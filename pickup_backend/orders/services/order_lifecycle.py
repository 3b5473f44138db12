"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions for Order
entities, who may trigger each one, and which controls a client should
offer for an order.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth
"""

from __future__ import annotations

from orders.models import Order, Payment

# ============================================================
# DOMAIN ERRORS
# ============================================================


class OrderLifecycleError(Exception):
    pass


class InvalidOrderTransitionError(OrderLifecycleError):
    pass


class InvalidOTPError(OrderLifecycleError):
    pass


class OrderNotDeletableError(OrderLifecycleError):
    pass


# ============================================================
# ACTORS
# ============================================================

ACTOR_BUYER = "buyer"
ACTOR_ADMIN = "admin"
# Order confirmation happens as a side effect of payment verification.
ACTOR_PAYMENT = "payment"
# Collection happens only through a matching pickup code.
ACTOR_OTP = "otp"

ACTORS = {ACTOR_BUYER, ACTOR_ADMIN, ACTOR_PAYMENT, ACTOR_OTP}

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_COLLECTED,
    Order.STATUS_CANCELLED,
}

# from_status -> {to_status -> actors allowed to trigger it}
ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_CANCELLED: {ACTOR_BUYER, ACTOR_ADMIN},
        Order.STATUS_CONFIRMED: {ACTOR_PAYMENT},
    },
    Order.STATUS_CONFIRMED: {
        Order.STATUS_READY_FOR_COLLECTION: {ACTOR_ADMIN},
        Order.STATUS_CANCELLED: {ACTOR_ADMIN},
    },
    Order.STATUS_READY_FOR_COLLECTION: {
        Order.STATUS_COLLECTED: {ACTOR_OTP},
    },
}

# Statuses an admin may request through the plain status-update endpoint.
ADMIN_SETTABLE_STATUSES = {
    Order.STATUS_READY_FOR_COLLECTION,
    Order.STATUS_CANCELLED,
}

PAYMENT_SUBMITTABLE_STATUSES = {
    Order.PAYMENT_PENDING,
    Order.PAYMENT_FAILED,
}

# ============================================================
# CLIENT ACTIONS
# ============================================================

ACTION_CANCEL = "cancel"
ACTION_SUBMIT_PAYMENT = "submit_payment"
ACTION_MARK_READY = "mark_ready"
ACTION_VERIFY_OTP = "verify_otp"
ACTION_DELETE = "delete"


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str, actor: str | None = None) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    actors = ALLOWED_TRANSITIONS.get(from_status, {}).get(to_status)
    if actors is None:
        return False

    return actor is None or actor in actors


def _guard_violation(*, order: Order, target_status: str) -> str | None:
    # A verified payment means the buyer has paid; cancelling a PENDING order
    # in that window is not allowed.
    if (
        order.status == Order.STATUS_PENDING
        and target_status == Order.STATUS_CANCELLED
        and order.payment_status == Order.PAYMENT_VERIFIED
    ):
        return "payment has already been verified"
    return None


def validate_transition(*, order: Order, target_status: str, actor: str):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
        actor=actor,
    ):
        raise InvalidOrderTransitionError(
            f"Order {order.order_number} cannot transition from "
            f"'{order.status}' to '{target_status}' (actor: {actor})"
        )

    reason = _guard_violation(order=order, target_status=target_status)
    if reason:
        raise InvalidOrderTransitionError(
            f"Order {order.order_number} cannot be cancelled: {reason}"
        )


def is_transition_allowed(*, order: Order, target_status: str, actor: str) -> bool:
    try:
        validate_transition(order=order, target_status=target_status, actor=actor)
    except InvalidOrderTransitionError:
        return False
    return True


def validate_deletable(*, order: Order):
    if order.status != Order.STATUS_CANCELLED:
        raise OrderNotDeletableError(
            f"Order {order.order_number} is {order.status}; only CANCELLED orders can be deleted"
        )


def can_submit_payment(*, order: Order, has_pending_payment: bool) -> bool:
    return (
        order.status == Order.STATUS_PENDING
        and order.payment_status in PAYMENT_SUBMITTABLE_STATUSES
        and not has_pending_payment
    )


def _has_pending_payment(order: Order) -> bool:
    return order.payments.filter(status=Payment.STATUS_PENDING).exists()


def available_actions(order: Order, actor: str, *, has_pending_payment: bool | None = None) -> list[str]:
    """
    Controls a client may render for `order`.

    buyer: cancel, submit_payment
    admin: mark_ready, cancel, verify_otp, delete
    """
    actions: list[str] = []

    if actor == ACTOR_BUYER:
        if is_transition_allowed(order=order, target_status=Order.STATUS_CANCELLED, actor=ACTOR_BUYER):
            actions.append(ACTION_CANCEL)

        if has_pending_payment is None:
            has_pending_payment = (
                _has_pending_payment(order) if order.status == Order.STATUS_PENDING else False
            )
        if can_submit_payment(order=order, has_pending_payment=has_pending_payment):
            actions.append(ACTION_SUBMIT_PAYMENT)

        return actions

    if actor == ACTOR_ADMIN:
        if is_transition_allowed(
            order=order, target_status=Order.STATUS_READY_FOR_COLLECTION, actor=ACTOR_ADMIN
        ):
            actions.append(ACTION_MARK_READY)
        if is_transition_allowed(order=order, target_status=Order.STATUS_CANCELLED, actor=ACTOR_ADMIN):
            actions.append(ACTION_CANCEL)
        if can_transition(
            from_status=order.status, to_status=Order.STATUS_COLLECTED, actor=ACTOR_OTP
        ):
            actions.append(ACTION_VERIFY_OTP)
        if order.status == Order.STATUS_CANCELLED:
            actions.append(ACTION_DELETE)
        return actions

    raise ValueError(f"Unknown actor: {actor}")
