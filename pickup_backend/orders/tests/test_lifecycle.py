# orders/tests/test_lifecycle.py

from itertools import product

from django.test import SimpleTestCase

from orders.models import Order
from orders.services.order_lifecycle import (
    ACTION_CANCEL,
    ACTION_DELETE,
    ACTION_MARK_READY,
    ACTION_SUBMIT_PAYMENT,
    ACTION_VERIFY_OTP,
    ACTOR_ADMIN,
    ACTOR_BUYER,
    ACTOR_OTP,
    ACTOR_PAYMENT,
    InvalidOrderTransitionError,
    OrderNotDeletableError,
    available_actions,
    can_transition,
    validate_deletable,
    validate_transition,
)

STATUSES = [
    Order.STATUS_PENDING,
    Order.STATUS_CONFIRMED,
    Order.STATUS_READY_FOR_COLLECTION,
    Order.STATUS_COLLECTED,
    Order.STATUS_CANCELLED,
]
ACTORS = [ACTOR_BUYER, ACTOR_ADMIN, ACTOR_PAYMENT, ACTOR_OTP]

# (from, to, actor) triples that are legal; everything else is rejected.
LEGAL = {
    (Order.STATUS_PENDING, Order.STATUS_CANCELLED, ACTOR_BUYER),
    (Order.STATUS_PENDING, Order.STATUS_CANCELLED, ACTOR_ADMIN),
    (Order.STATUS_PENDING, Order.STATUS_CONFIRMED, ACTOR_PAYMENT),
    (Order.STATUS_CONFIRMED, Order.STATUS_READY_FOR_COLLECTION, ACTOR_ADMIN),
    (Order.STATUS_CONFIRMED, Order.STATUS_CANCELLED, ACTOR_ADMIN),
    (Order.STATUS_READY_FOR_COLLECTION, Order.STATUS_COLLECTED, ACTOR_OTP),
}


def _order(status, payment_status=Order.PAYMENT_PENDING):
    return Order(order_number="ORD-TEST", status=status, payment_status=payment_status)


class TransitionTableTests(SimpleTestCase):
    """
    GUARANTEES:
    - Exactly the listed (from, to, actor) triples are legal
    - Terminal states have no outgoing transitions
    - Self transitions are never legal
    """

    def test_every_state_target_and_actor(self):
        for from_status, to_status, actor in product(STATUSES, STATUSES, ACTORS):
            with self.subTest(from_status=from_status, to_status=to_status, actor=actor):
                expected = (from_status, to_status, actor) in LEGAL
                self.assertEqual(
                    can_transition(from_status=from_status, to_status=to_status, actor=actor),
                    expected,
                )

    def test_actor_agnostic_check_matches_any_legal_actor(self):
        for from_status, to_status in product(STATUSES, STATUSES):
            with self.subTest(from_status=from_status, to_status=to_status):
                expected = any((from_status, to_status, a) in LEGAL for a in ACTORS)
                self.assertEqual(
                    can_transition(from_status=from_status, to_status=to_status),
                    expected,
                )

    def test_terminal_states_have_no_exits(self):
        for terminal in (Order.STATUS_COLLECTED, Order.STATUS_CANCELLED):
            for to_status, actor in product(STATUSES, ACTORS):
                self.assertFalse(
                    can_transition(from_status=terminal, to_status=to_status, actor=actor)
                )

    def test_validate_transition_raises_for_illegal_move(self):
        with self.assertRaises(InvalidOrderTransitionError):
            validate_transition(
                order=_order(Order.STATUS_PENDING),
                target_status=Order.STATUS_READY_FOR_COLLECTION,
                actor=ACTOR_ADMIN,
            )

    def test_collected_cannot_be_set_by_admin(self):
        with self.assertRaises(InvalidOrderTransitionError):
            validate_transition(
                order=_order(Order.STATUS_READY_FOR_COLLECTION),
                target_status=Order.STATUS_COLLECTED,
                actor=ACTOR_ADMIN,
            )

    def test_pending_order_with_verified_payment_cannot_be_cancelled(self):
        order = _order(Order.STATUS_PENDING, payment_status=Order.PAYMENT_VERIFIED)

        for actor in (ACTOR_BUYER, ACTOR_ADMIN):
            with self.subTest(actor=actor):
                with self.assertRaises(InvalidOrderTransitionError):
                    validate_transition(
                        order=order, target_status=Order.STATUS_CANCELLED, actor=actor
                    )

    def test_only_cancelled_orders_are_deletable(self):
        validate_deletable(order=_order(Order.STATUS_CANCELLED))

        for status in STATUSES:
            if status == Order.STATUS_CANCELLED:
                continue
            with self.subTest(status=status):
                with self.assertRaises(OrderNotDeletableError):
                    validate_deletable(order=_order(status))


class AvailableActionsTests(SimpleTestCase):
    def test_buyer_actions_on_fresh_order(self):
        actions = available_actions(
            _order(Order.STATUS_PENDING), ACTOR_BUYER, has_pending_payment=False
        )
        self.assertEqual(actions, [ACTION_CANCEL, ACTION_SUBMIT_PAYMENT])

    def test_buyer_cannot_resubmit_while_receipt_pending(self):
        actions = available_actions(
            _order(Order.STATUS_PENDING), ACTOR_BUYER, has_pending_payment=True
        )
        self.assertEqual(actions, [ACTION_CANCEL])

    def test_buyer_can_resubmit_after_rejection(self):
        order = _order(Order.STATUS_PENDING, payment_status=Order.PAYMENT_FAILED)
        actions = available_actions(order, ACTOR_BUYER, has_pending_payment=False)
        self.assertIn(ACTION_SUBMIT_PAYMENT, actions)

    def test_buyer_has_no_actions_once_confirmed(self):
        order = _order(Order.STATUS_CONFIRMED, payment_status=Order.PAYMENT_VERIFIED)
        self.assertEqual(available_actions(order, ACTOR_BUYER, has_pending_payment=False), [])

    def test_admin_actions_by_status(self):
        expected = {
            Order.STATUS_PENDING: [ACTION_CANCEL],
            Order.STATUS_CONFIRMED: [ACTION_MARK_READY, ACTION_CANCEL],
            Order.STATUS_READY_FOR_COLLECTION: [ACTION_VERIFY_OTP],
            Order.STATUS_COLLECTED: [],
            Order.STATUS_CANCELLED: [ACTION_DELETE],
        }
        for status, actions in expected.items():
            with self.subTest(status=status):
                self.assertEqual(
                    available_actions(_order(status), ACTOR_ADMIN, has_pending_payment=False),
                    actions,
                )

    def test_unknown_actor_is_rejected(self):
        with self.assertRaises(ValueError):
            available_actions(_order(Order.STATUS_PENDING), "courier", has_pending_payment=False)
