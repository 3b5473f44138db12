# products/services/stock.py

"""
STOCK RESERVATION

Purpose:
- Reserve stock when an order is placed (decrement Product.quantity).
- Release stock when an order is cancelled (increment it back).

Rules:
- Callers must already be inside transaction.atomic().
- Rows are locked with select_for_update() in a stable (id) order so two
  checkouts touching the same products cannot deadlock.
- Quantities are whole units.
"""

from __future__ import annotations

from django.db.models import F

from products.models import Product


# ============================================================
# DOMAIN ERRORS
# ============================================================

class InsufficientStockError(Exception):
    def __init__(self, product, requested: int):
        self.product = product
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product.name}: "
            f"requested {requested}, available {product.quantity}"
        )


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise ValueError("quantity must be a whole integer unit")
    qty = int(value)
    if qty < 1:
        raise ValueError("quantity must be at least 1")
    return qty


def lock_products(product_ids) -> dict:
    """
    Lock and return {product_id: Product} for the given ids.
    """
    ids = sorted({str(pid) for pid in product_ids})
    rows = Product.objects.select_for_update().filter(id__in=ids).order_by("id")
    return {str(p.id): p for p in rows}


def reserve_stock(lines) -> None:
    """
    lines: iterable of (product, quantity). Products must have been fetched
    with lock_products() in the same transaction.
    """
    for product, quantity in lines:
        qty = _to_int_qty(quantity)
        if product.quantity < qty:
            raise InsufficientStockError(product, qty)

    for product, quantity in lines:
        qty = _to_int_qty(quantity)
        Product.objects.filter(id=product.id).update(quantity=F("quantity") - qty)
        product.quantity -= qty


def release_stock(lines) -> None:
    """
    Return previously reserved units (order cancellation).
    """
    for product_id, quantity in lines:
        qty = _to_int_qty(quantity)
        Product.objects.filter(id=product_id).update(quantity=F("quantity") + qty)
