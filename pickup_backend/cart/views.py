# cart/views.py

"""
CART API VIEWS

/api/user/cart/            GET    active cart
                           POST   add {product_id, quantity}
                           DELETE clear
/api/user/cart/<item_id>/  PUT/PATCH {quantity}
                           DELETE remove line

Quantities are clamped to product stock; when that happens the response
message says so and `data.clamped` is true.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView

from cart.models import CartItem
from cart.serializers import (
    AddCartItemInputSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)
from cart.services.cart_service import (
    InvalidQuantityError,
    OutOfStockError,
    ProductUnavailableError,
    add_item,
    clear_cart,
    get_active_cart,
    remove_item,
    update_item,
)
from core.responses import error_response, success_response
from permissions.roles import IsUserOrAdmin


def _cart_payload(user, mutation=None) -> dict:
    data = CartSerializer(get_active_cart(user=user)).data
    if mutation is not None:
        data["clamped"] = mutation.clamped
    return data


def _mutation_message(mutation, default: str) -> str:
    if mutation.clamped:
        return f"Only {mutation.applied} available; quantity adjusted to available stock"
    return default


def _cart_error(exc):
    if isinstance(exc, OutOfStockError):
        code = "OUT_OF_STOCK"
    elif isinstance(exc, ProductUnavailableError):
        code = "PRODUCT_UNAVAILABLE"
    else:
        code = "INVALID_QUANTITY"
    return error_response(
        code=code, message=str(exc), http_status=status.HTTP_400_BAD_REQUEST
    )


def _item_not_found():
    return error_response(
        code="NOT_FOUND",
        message="Cart item not found",
        http_status=status.HTTP_404_NOT_FOUND,
    )


class CartView(APIView):
    permission_classes = [IsUserOrAdmin]
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer})
    def get(self, request):
        return success_response(data=_cart_payload(request.user))

    @extend_schema(request=AddCartItemInputSerializer, responses={200: CartSerializer})
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            mutation = add_item(
                user=request.user,
                product_id=serializer.validated_data["product_id"],
                quantity=serializer.validated_data["quantity"],
            )
        except (ProductUnavailableError, OutOfStockError, InvalidQuantityError) as exc:
            return _cart_error(exc)

        return success_response(
            data=_cart_payload(request.user, mutation),
            message=_mutation_message(mutation, "Added to cart"),
        )

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request):
        clear_cart(user=request.user)
        return success_response(data=_cart_payload(request.user), message="Cart cleared")


class CartItemView(APIView):
    permission_classes = [IsUserOrAdmin]
    serializer_class = CartSerializer

    @extend_schema(request=UpdateCartItemInputSerializer, responses={200: CartSerializer})
    def put(self, request, item_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            mutation = update_item(
                user=request.user,
                item_id=item_id,
                quantity=serializer.validated_data["quantity"],
            )
        except CartItem.DoesNotExist:
            return _item_not_found()
        except (ProductUnavailableError, OutOfStockError, InvalidQuantityError) as exc:
            return _cart_error(exc)

        return success_response(
            data=_cart_payload(request.user, mutation),
            message=_mutation_message(mutation, "Cart updated"),
        )

    patch = put

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request, item_id):
        try:
            remove_item(user=request.user, item_id=item_id)
        except CartItem.DoesNotExist:
            return _item_not_found()

        return success_response(
            data=_cart_payload(request.user), message="Item removed from cart"
        )
