# cart/services/cart_service.py

"""
CART SERVICE

All cart mutations go through here so the stock clamp is applied the same
way on add and update:

    stored quantity = min(requested quantity, product.quantity)

Adding a product that is already in the cart sums the quantities first and
then clamps. Each mutation returns a CartMutation so the API can tell the
shopper when their request was reduced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from cart.models import Cart, CartItem
from products.models import Product

logger = logging.getLogger(__name__)


# ============================================================
# DOMAIN ERRORS
# ============================================================

class CartError(Exception):
    pass


class ProductUnavailableError(CartError):
    pass


class OutOfStockError(CartError):
    pass


class InvalidQuantityError(CartError):
    pass


@dataclass(frozen=True)
class CartMutation:
    item: Optional[CartItem]
    requested: int
    applied: int

    @property
    def clamped(self) -> bool:
        return self.applied < self.requested


# ============================================================
# HELPERS
# ============================================================

def get_active_cart(*, user) -> Cart:
    cart, _ = Cart.objects.get_or_create(user=user, is_active=True)
    return cart


def _to_quantity(value) -> int:
    if isinstance(value, bool):
        raise InvalidQuantityError("quantity must be a whole number")
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise InvalidQuantityError("quantity must be a whole number")
    if qty < 1:
        raise InvalidQuantityError("quantity must be at least 1")
    return qty


def clamp_to_stock(*, product: Product, quantity: int) -> int:
    return min(int(quantity), int(product.quantity or 0))


def _require_purchasable(product: Product) -> None:
    if not product.is_active or not product.store.is_active:
        raise ProductUnavailableError(f"{product.name} is not available")
    if product.quantity <= 0:
        raise OutOfStockError(f"{product.name} is out of stock")


# ============================================================
# OPERATIONS
# ============================================================

@transaction.atomic
def add_item(*, user, product_id, quantity) -> CartMutation:
    qty = _to_quantity(quantity)

    product = (
        Product.objects.select_related("store").filter(id=product_id).first()
    )
    if product is None:
        raise ProductUnavailableError("Product not found")
    _require_purchasable(product)

    cart = get_active_cart(user=user)
    item = (
        CartItem.objects.select_for_update()
        .filter(cart=cart, product=product)
        .first()
    )

    requested = qty + (item.quantity if item else 0)
    applied = clamp_to_stock(product=product, quantity=requested)

    if item is None:
        item = CartItem(cart=cart, product=product)
    item.quantity = applied
    item.unit_price = product.price
    item.save()

    if applied < requested:
        logger.info(
            "Cart quantity clamped to stock",
            extra={
                "cart_id": str(cart.id),
                "product_id": str(product.id),
                "requested": requested,
                "applied": applied,
            },
        )

    return CartMutation(item=item, requested=requested, applied=applied)


@transaction.atomic
def update_item(*, user, item_id, quantity) -> CartMutation:
    qty = _to_quantity(quantity)

    cart = get_active_cart(user=user)
    item = (
        CartItem.objects.select_for_update()
        .select_related("product", "product__store")
        .filter(cart=cart, id=item_id)
        .first()
    )
    if item is None:
        raise CartItem.DoesNotExist("Cart item not found")

    product = item.product
    _require_purchasable(product)

    applied = clamp_to_stock(product=product, quantity=qty)
    item.quantity = applied
    item.unit_price = product.price
    item.save()

    return CartMutation(item=item, requested=qty, applied=applied)


@transaction.atomic
def remove_item(*, user, item_id) -> None:
    cart = get_active_cart(user=user)
    deleted, _ = CartItem.objects.filter(cart=cart, id=item_id).delete()
    if not deleted:
        raise CartItem.DoesNotExist("Cart item not found")


@transaction.atomic
def clear_cart(*, user) -> None:
    cart = get_active_cart(user=user)
    cart.items.all().delete()
