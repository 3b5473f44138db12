# orders/tests/test_order_service.py

import logging
from datetime import timedelta

from django.utils import timezone

from cart.models import CartItem
from cart.services.cart_service import add_item, get_active_cart
from core.tests.fixtures import (
    PICKUP_TIME,
    make_product,
    make_store,
    make_user,
    receipt_file,
    tomorrow,
)
from notifications.models import Notification
from orders.models import Order, Payment
from orders.services.order_lifecycle import (
    ACTOR_ADMIN,
    ACTOR_BUYER,
    ACTION_VERIFY_OTP,
    InvalidOrderTransitionError,
    InvalidOTPError,
    OrderNotDeletableError,
    available_actions,
)
from orders.services.order_service import (
    CheckoutError,
    EmptyCartError,
    StockValidationError,
    buy_now,
    cancel_order,
    create_order_from_cart,
    delete_order,
    update_order_status,
    verify_pickup_otp,
)
from orders.services.payment_service import submit_receipt

from .base import OrderTestCase, wrong_code


class CheckoutTests(OrderTestCase):
    """
    GUARANTEES:
    - Totals and unit prices are computed server-side and snapshotted
    - Stock is reserved at checkout
    - Only the selected store's cart lines are ordered and removed
    """

    def test_create_order_from_cart_uses_only_selected_store_lines(self):
        other_store = make_store(name="Uptown")
        elsewhere = make_product(other_store, name="Tea", price="2.00", quantity=4)

        add_item(user=self.buyer, product_id=self.juice.id, quantity=2)
        add_item(user=self.buyer, product_id=self.crisps.id, quantity=4)
        add_item(user=self.buyer, product_id=elsewhere.id, quantity=1)

        order = create_order_from_cart(
            user=self.buyer,
            store_id=self.store.id,
            pickup_date=tomorrow(),
            pickup_time=PICKUP_TIME,
            notes="  Ring the bell  ",
        )

        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.payment_status, Order.PAYMENT_PENDING)
        self.assertTrue(order.order_number.startswith("ORD"))
        self.assertEqual(order.notes, "Ring the bell")
        self.assertEqual(str(order.total_amount), "12.00")
        self.assertEqual(order.items.count(), 2)

        self.juice.refresh_from_db()
        self.crisps.refresh_from_db()
        self.assertEqual(self.juice.quantity, 8)
        self.assertEqual(self.crisps.quantity, 1)

        remaining = CartItem.objects.filter(cart=get_active_cart(user=self.buyer))
        self.assertEqual([i.product_id for i in remaining], [elsewhere.id])

        self.assertTrue(
            Notification.objects.filter(
                user=self.buyer, order=order, type=Notification.TYPE_ORDER_CREATED
            ).exists()
        )

    def test_empty_selection_is_rejected(self):
        with self.assertRaises(EmptyCartError):
            create_order_from_cart(
                user=self.buyer,
                store_id=self.store.id,
                pickup_date=tomorrow(),
                pickup_time=PICKUP_TIME,
            )
        self.assertEqual(Order.objects.count(), 0)

    def test_buy_now_leaves_cart_untouched(self):
        add_item(user=self.buyer, product_id=self.crisps.id, quantity=1)

        order = self.place(quantity=3)

        self.assertEqual(str(order.total_amount), "10.50")
        item = order.items.get()
        self.assertEqual(item.product_name, "Orange Juice")
        self.assertEqual(str(item.unit_price), "3.50")
        self.assertEqual(get_active_cart(user=self.buyer).items.count(), 1)

    def test_price_is_snapshotted(self):
        order = self.place(quantity=1)

        self.juice.price = "9.99"
        self.juice.save()

        self.assertEqual(str(order.items.get().unit_price), "3.50")

    def test_insufficient_stock_rolls_back(self):
        with self.assertRaises(StockValidationError):
            self.place(quantity=11)

        self.juice.refresh_from_db()
        self.assertEqual(self.juice.quantity, 10)
        self.assertEqual(Order.objects.count(), 0)

    def test_product_from_another_store_is_rejected(self):
        other = make_product(make_store(name="Uptown"), name="Tea")

        with self.assertRaises(CheckoutError):
            self.place(product=other, quantity=1)

    def test_inactive_product_is_rejected(self):
        self.juice.is_active = False
        self.juice.save()

        with self.assertRaises(CheckoutError):
            self.place(quantity=1)


class CancelTests(OrderTestCase):
    def test_buyer_cancel_releases_stock_and_records_reason(self):
        order = self.place(quantity=4)

        cancel_order(order_id=order.id, actor=ACTOR_BUYER, user=self.buyer, reason="Changed my mind")

        order.refresh_from_db()
        self.juice.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertEqual(order.cancel_reason, "Changed my mind")
        self.assertIsNotNone(order.cancelled_at)
        self.assertEqual(self.juice.quantity, 10)

    def test_buyer_cannot_cancel_someone_elses_order(self):
        order = self.place()
        stranger = make_user(email="stranger@example.com")

        with self.assertRaises(Order.DoesNotExist):
            cancel_order(order_id=order.id, actor=ACTOR_BUYER, user=stranger)

    def test_buyer_cannot_cancel_confirmed_order(self):
        order = self.confirm(self.place())

        with self.assertRaises(InvalidOrderTransitionError):
            cancel_order(order_id=order.id, actor=ACTOR_BUYER, user=self.buyer)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_CONFIRMED)

    def test_admin_can_cancel_confirmed_order(self):
        order = self.confirm(self.place(quantity=3))

        cancel_order(order_id=order.id, actor=ACTOR_ADMIN, reason="Out of stock at till")

        order.refresh_from_db()
        self.juice.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertEqual(self.juice.quantity, 10)

    def test_cancel_rejects_pending_receipt(self):
        order = self.place()
        payment = submit_receipt(user=self.buyer, order_id=order.id, receipt_image=receipt_file())

        cancel_order(order_id=order.id, actor=ACTOR_BUYER, user=self.buyer)

        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.STATUS_REJECTED)

    def test_cancelled_order_offers_only_delete(self):
        order = self.place()
        cancel_order(order_id=order.id, actor=ACTOR_ADMIN)
        order.refresh_from_db()

        self.assertEqual(available_actions(order, ACTOR_ADMIN), ["delete"])
        self.assertEqual(available_actions(order, ACTOR_BUYER), [])

        with self.assertRaises(InvalidOrderTransitionError):
            update_order_status(order_id=order.id, target_status=Order.STATUS_READY_FOR_COLLECTION)


class StatusUpdateTests(OrderTestCase):
    def test_mark_ready_requires_confirmation(self):
        order = self.place()

        with self.assertRaises(InvalidOrderTransitionError):
            update_order_status(order_id=order.id, target_status=Order.STATUS_READY_FOR_COLLECTION)

    def test_mark_ready_notifies_with_pickup_code(self):
        order = self.make_ready(self.place())

        self.assertEqual(order.status, Order.STATUS_READY_FOR_COLLECTION)
        self.assertIsNotNone(order.ready_at)
        note = Notification.objects.get(
            order=order, type=Notification.TYPE_READY_FOR_COLLECTION
        )
        self.assertEqual(note.data["otp"], order.otp)

    def test_collected_and_confirmed_cannot_be_requested(self):
        order = self.make_ready(self.place())

        for target in (Order.STATUS_COLLECTED, Order.STATUS_CONFIRMED, Order.STATUS_PENDING):
            with self.subTest(target=target):
                with self.assertRaises(InvalidOrderTransitionError):
                    update_order_status(order_id=order.id, target_status=target)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_READY_FOR_COLLECTION)


class PickupOTPTests(OrderTestCase):
    def test_wrong_otp_leaves_order_ready(self):
        order = self.make_ready(self.place())

        with self.assertRaises(InvalidOTPError):
            verify_pickup_otp(order_id=order.id, otp=wrong_code(order.otp))

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_READY_FOR_COLLECTION)
        self.assertIsNone(order.collected_at)

    def test_correct_otp_collects_and_removes_action(self):
        order = self.make_ready(self.place())

        verify_pickup_otp(order_id=order.id, otp=order.otp)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_COLLECTED)
        self.assertIsNotNone(order.collected_at)
        self.assertNotIn(ACTION_VERIFY_OTP, available_actions(order, ACTOR_ADMIN))

        with self.assertRaises(InvalidOrderTransitionError):
            verify_pickup_otp(order_id=order.id, otp=order.otp)

    def test_malformed_otp_is_rejected_before_lookup(self):
        for bad in ("12345", "1234567", "12a456", "", None):
            with self.subTest(otp=bad):
                with self.assertRaises(InvalidOTPError):
                    verify_pickup_otp(order_id="00000000-0000-0000-0000-000000000000", otp=bad)

    def test_otp_cannot_collect_confirmed_order(self):
        order = self.confirm(self.place())

        with self.assertRaises(InvalidOrderTransitionError):
            verify_pickup_otp(order_id=order.id, otp=order.otp)


SERVICE_LOGGER = "orders.services.order_service"

# Attributes every LogRecord carries; anything else came in through `extra`.
_RECORD_ATTRS = set(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def _extra(record) -> dict:
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


class TransitionLoggingTests(OrderTestCase):
    """
    GUARANTEES:
    - Every transition logs "Order transition" at INFO with from/to/actor
    - Refused transitions log at WARNING
    - OTP mismatches log at WARNING and never carry the submitted or issued code
    """

    def test_transition_is_logged_at_info(self):
        order = self.confirm(self.place())

        with self.assertLogs(SERVICE_LOGGER, "INFO") as logs:
            update_order_status(
                order_id=order.id, target_status=Order.STATUS_READY_FOR_COLLECTION
            )

        transitions = [r for r in logs.records if r.getMessage() == "Order transition"]
        self.assertEqual(len(transitions), 1)
        record = transitions[0]
        self.assertEqual(record.levelno, logging.INFO)
        self.assertEqual(record.from_status, Order.STATUS_CONFIRMED)
        self.assertEqual(record.to_status, Order.STATUS_READY_FOR_COLLECTION)
        self.assertEqual(record.actor, ACTOR_ADMIN)
        self.assertEqual(record.order_id, str(order.id))

    def test_refused_transition_is_logged_at_warning(self):
        order = self.place()

        with self.assertLogs(SERVICE_LOGGER, "INFO") as logs:
            with self.assertRaises(InvalidOrderTransitionError):
                update_order_status(
                    order_id=order.id, target_status=Order.STATUS_READY_FOR_COLLECTION
                )

        refused = [r for r in logs.records if r.getMessage() == "Rejected order transition"]
        self.assertEqual(len(refused), 1)
        self.assertEqual(refused[0].levelno, logging.WARNING)
        self.assertEqual(refused[0].from_status, Order.STATUS_PENDING)

    def test_otp_mismatch_is_logged_without_codes(self):
        order = self.make_ready(self.place())
        submitted = wrong_code(order.otp)

        with self.assertLogs(SERVICE_LOGGER, "INFO") as logs:
            with self.assertRaises(InvalidOTPError):
                verify_pickup_otp(order_id=order.id, otp=submitted)

        mismatches = [r for r in logs.records if r.getMessage() == "Pickup OTP mismatch"]
        self.assertEqual(len(mismatches), 1)
        self.assertEqual(mismatches[0].levelno, logging.WARNING)

        for record in logs.records:
            message = record.getMessage()
            self.assertNotIn(submitted, message)
            self.assertNotIn(order.otp, message)
            for key, value in _extra(record).items():
                with self.subTest(key=key):
                    self.assertNotIn("otp", key)
                    self.assertNotEqual(str(value), submitted)
                    self.assertNotEqual(str(value), order.otp)

    def test_successful_collection_does_not_log_the_code(self):
        order = self.make_ready(self.place())

        with self.assertLogs(SERVICE_LOGGER, "INFO") as logs:
            verify_pickup_otp(order_id=order.id, otp=order.otp)

        self.assertIn("Order transition", [r.getMessage() for r in logs.records])
        for record in logs.records:
            self.assertNotIn(order.otp, record.getMessage())
            self.assertNotIn(order.otp, [str(v) for v in _extra(record).values()])


class DeleteTests(OrderTestCase):
    def test_only_cancelled_orders_can_be_deleted(self):
        order = self.place()

        with self.assertRaises(OrderNotDeletableError):
            delete_order(order_id=order.id)

        cancel_order(order_id=order.id, actor=ACTOR_ADMIN)
        delete_order(order_id=order.id)

        self.assertFalse(Order.objects.filter(id=order.id).exists())


class PickupDateTests(OrderTestCase):
    def test_order_keeps_requested_pickup_slot(self):
        when = timezone.localdate() + timedelta(days=3)
        order = buy_now(
            user=self.buyer,
            product_id=self.juice.id,
            quantity=1,
            store_id=self.store.id,
            pickup_date=when,
            pickup_time=PICKUP_TIME,
        )
        order.refresh_from_db()
        self.assertEqual(order.pickup_date, when)
        self.assertEqual(order.pickup_time, PICKUP_TIME)
