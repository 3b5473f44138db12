# orders/services/payment_service.py

"""
PAYMENT RECEIPT WORKFLOW

Buyer:
- submit_receipt(): upload proof of payment for their own PENDING order.

Admin:
- review_payment(decision=VERIFIED): payment VERIFIED, order payment VERIFIED,
  order PENDING -> CONFIRMED, pickup OTP issued to the buyer.
- review_payment(decision=REJECTED): needs non-blank notes; payment REJECTED,
  order payment FAILED so the buyer can resubmit.

Locking order: the order row is always locked before the payment row.
"""

from __future__ import annotations

import logging

from django.db import transaction

from core.money import money
from notifications.models import Notification
from notifications.services import notify, pickup_data
from orders.models import Order, Payment
from orders.services.order_lifecycle import can_submit_payment
from orders.services.order_service import confirm_order_for_payment

logger = logging.getLogger(__name__)


# ============================================================
# DOMAIN ERRORS
# ============================================================

class PaymentWorkflowError(Exception):
    pass


class PaymentAlreadyProcessedError(PaymentWorkflowError):
    pass


class RejectionNotesRequiredError(PaymentWorkflowError):
    pass


class PaymentNotAllowedError(PaymentWorkflowError):
    pass


REVIEW_DECISIONS = {Payment.STATUS_VERIFIED, Payment.STATUS_REJECTED}


# ============================================================
# QUERIES
# ============================================================

def latest_payment_for_order(order: Order) -> Payment | None:
    return order.payments.order_by("-submitted_at").first()


# ============================================================
# BUYER
# ============================================================

@transaction.atomic
def submit_receipt(
    *,
    user,
    order_id,
    receipt_image,
    amount=None,
    payment_method: str = "",
    notes: str = "",
) -> Payment:
    order = Order.objects.select_for_update().get(id=order_id, user=user)

    has_pending = order.payments.filter(status=Payment.STATUS_PENDING).exists()
    if not can_submit_payment(order=order, has_pending_payment=has_pending):
        if has_pending:
            reason = "A payment for this order is already awaiting review"
        elif order.status != Order.STATUS_PENDING:
            reason = f"Payments cannot be submitted for a {order.status} order"
        else:
            reason = "Payment for this order has already been verified"
        logger.warning(
            "Receipt submission refused",
            extra={"order_id": str(order.id), "reason": reason},
        )
        raise PaymentNotAllowedError(reason)

    payment = Payment.objects.create(
        order=order,
        user=user,
        amount=money(amount) if amount not in (None, "") else order.total_amount,
        payment_method=(payment_method or "").strip(),
        receipt_image=receipt_image,
        notes=(notes or "").strip(),
    )

    if order.payment_status != Order.PAYMENT_PENDING:
        order.payment_status = Order.PAYMENT_PENDING
        order.save(update_fields=["payment_status", "updated_at"])

    logger.info(
        "Payment receipt submitted",
        extra={
            "payment_id": str(payment.id),
            "order_id": str(order.id),
            "amount": str(payment.amount),
        },
    )
    return payment


# ============================================================
# ADMIN
# ============================================================

@transaction.atomic
def review_payment(*, payment_id, reviewer, decision: str, verification_notes: str = "") -> Payment:
    notes = (verification_notes or "").strip()

    if decision not in REVIEW_DECISIONS:
        raise PaymentWorkflowError(f"Unknown review decision: {decision}")
    if decision == Payment.STATUS_REJECTED and not notes:
        raise RejectionNotesRequiredError("Verification notes are required to reject a payment")

    order_id = Payment.objects.values_list("order_id", flat=True).get(id=payment_id)
    order = Order.objects.select_for_update().get(id=order_id)
    payment = Payment.objects.select_for_update().get(id=payment_id)

    if payment.status != Payment.STATUS_PENDING:
        logger.warning(
            "Payment already processed",
            extra={"payment_id": str(payment.id), "status": payment.status},
        )
        raise PaymentAlreadyProcessedError(f"Payment has already been {payment.status.lower()}")

    payment.mark_reviewed(status=decision, reviewer=reviewer, notes=notes)
    payment.save(
        update_fields=["status", "verified_by", "verification_notes", "verified_at", "updated_at"]
    )

    if decision == Payment.STATUS_VERIFIED:
        confirm_order_for_payment(order)
        notify(
            user=order.user,
            notification_type=Notification.TYPE_PAYMENT_VERIFIED,
            title="Payment verified",
            message=f"Your payment for order {order.order_number} has been verified.",
            order=order,
            data=pickup_data(order, include_otp=True),
        )
    else:
        order.payment_status = Order.PAYMENT_FAILED
        order.save(update_fields=["payment_status", "updated_at"])
        notify(
            user=order.user,
            notification_type=Notification.TYPE_PAYMENT_REJECTED,
            title="Payment rejected",
            message=(
                f"Your payment for order {order.order_number} was rejected: {notes}. "
                "Please submit a new receipt."
            ),
            order=order,
            data={**pickup_data(order), "verification_notes": notes},
        )

    logger.info(
        "Payment reviewed",
        extra={
            "payment_id": str(payment.id),
            "order_id": str(order.id),
            "decision": decision,
            "reviewer_id": str(getattr(reviewer, "pk", "")),
        },
    )
    return payment
