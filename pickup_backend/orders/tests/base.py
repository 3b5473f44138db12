# orders/tests/base.py

import shutil
import tempfile

from django.test import TestCase, override_settings

from core.tests.fixtures import (
    PICKUP_TIME,
    make_admin,
    make_product,
    make_store,
    make_user,
    receipt_file,
    tomorrow,
)
from orders.models import Order, Payment
from orders.services.order_service import buy_now, update_order_status
from orders.services.payment_service import review_payment, submit_receipt

MEDIA_ROOT = tempfile.mkdtemp()


def wrong_code(otp: str) -> str:
    return "".join(str((int(c) + 1) % 10) for c in otp)


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class OrderTestCase(TestCase):
    """
    Buyer, admin and one store with two stocked products, plus helpers that
    walk an order through the lifecycle via the services.
    """

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.buyer = make_user()
        self.admin = make_admin()
        self.store = make_store()
        self.juice = make_product(self.store, name="Orange Juice", price="3.50", quantity=10)
        self.crisps = make_product(self.store, name="Crisps", price="1.25", quantity=5)

    def place(self, product=None, quantity=2):
        return buy_now(
            user=self.buyer,
            product_id=(product or self.juice).id,
            quantity=quantity,
            store_id=self.store.id,
            pickup_date=tomorrow(),
            pickup_time=PICKUP_TIME,
        )

    def confirm(self, order):
        payment = submit_receipt(user=self.buyer, order_id=order.id, receipt_image=receipt_file())
        review_payment(payment_id=payment.id, reviewer=self.admin, decision=Payment.STATUS_VERIFIED)
        order.refresh_from_db()
        return order

    def make_ready(self, order):
        self.confirm(order)
        return update_order_status(
            order_id=order.id, target_status=Order.STATUS_READY_FOR_COLLECTION
        )
