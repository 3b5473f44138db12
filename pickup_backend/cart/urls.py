# cart/urls.py

from django.urls import path

from cart.views import CartItemView, CartView

public_urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/<uuid:item_id>/", CartItemView.as_view(), name="cart-item"),
]
