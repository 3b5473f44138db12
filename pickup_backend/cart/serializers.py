# cart/serializers.py

"""
CART SERIALIZERS

Totals are computed server-side (never trusted from client). Money is
returned as strings to avoid float drift.
"""

from decimal import Decimal

from rest_framework import serializers

from cart.models import Cart, CartItem
from products.serializers import ProductSummarySerializer


def available_quantity(product) -> int:
    """
    Units a cart line could still be ordered with right now. Stock taken by
    other checkouts since the line was added shows up here.
    """
    if not product.is_active or not product.store.is_active:
        return 0
    return max(int(product.quantity or 0), 0)


class CartItemSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    available_quantity = serializers.SerializerMethodField()
    exceeds_stock = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product",
            "quantity",
            "unit_price",
            "subtotal",
            "available_quantity",
            "exceeds_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_available_quantity(self, obj) -> int:
        return available_quantity(obj.product)

    def get_exceeds_stock(self, obj) -> bool:
        return int(obj.quantity or 0) > available_quantity(obj.product)


class CartSerializer(serializers.ModelSerializer):
    items = serializers.SerializerMethodField()
    total_price = serializers.SerializerMethodField()
    item_count = serializers.SerializerMethodField()
    has_stock_issues = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ["id", "items", "total_price", "item_count", "has_stock_issues", "updated_at"]
        read_only_fields = fields

    def _items(self, obj):
        cached = getattr(obj, "_serialized_items", None)
        if cached is None:
            cached = list(
                obj.items.select_related("product", "product__store").order_by("created_at")
            )
            obj._serialized_items = cached
        return cached

    def get_items(self, obj) -> list:
        return CartItemSerializer(self._items(obj), many=True).data

    def get_total_price(self, obj) -> str:
        total = sum((i.subtotal for i in self._items(obj)), Decimal("0.00"))
        return f"{total:.2f}"

    def get_item_count(self, obj) -> int:
        return sum(int(i.quantity or 0) for i in self._items(obj))

    def get_has_stock_issues(self, obj) -> bool:
        return any(
            int(i.quantity or 0) > available_quantity(i.product) for i in self._items(obj)
        )


# =====================================================
# INPUT SERIALIZERS
# =====================================================

class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemInputSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
