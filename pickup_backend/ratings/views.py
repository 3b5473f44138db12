# ratings/views.py

"""
RATINGS API (/api/user/ratings/)

GET    ratings/                         own ratings
POST   ratings/                         {product, rating 1-5, review?}
GET    ratings/<id>/                    own rating
PUT    ratings/<id>/                    own rating only
DELETE ratings/<id>/                    own rating only
GET    ratings/product/<product_id>/    all ratings of a product + average
"""

from __future__ import annotations

from django.db.models import Avg, Count
from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404

from core.money import money
from core.responses import EnvelopeMixin, success_response
from permissions.roles import IsOwnerOrAdmin, IsUserOrAdmin
from products.models import Product
from ratings.models import Rating
from ratings.serializers import RatingSerializer


def rating_summary(product: Product) -> dict:
    agg = Rating.objects.filter(product=product).aggregate(
        average=Avg("rating"), total=Count("id")
    )
    average = agg["average"]
    return {
        "average_rating": str(money(average)) if average is not None else "0.00",
        "total_ratings": agg["total"],
    }


class RatingViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    serializer_class = RatingSerializer
    permission_classes = [IsUserOrAdmin, IsOwnerOrAdmin]
    envelope_messages = {
        "create": "Rating submitted",
        "update": "Rating updated",
        "partial_update": "Rating updated",
        "destroy": "Rating deleted",
    }

    def get_queryset(self):
        qs = Rating.objects.select_related("user", "product").order_by("-created_at")
        if self.action == "list":
            return qs.filter(user=self.request.user)
        # Detail actions see every row; IsOwnerOrAdmin gates the object.
        return qs

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    @extend_schema(responses={200: RatingSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path=r"product/(?P<product_id>[^/.]+)")
    def product(self, request, product_id=None):
        product = get_object_or_404(Product, id=product_id)
        ratings = self.get_queryset().filter(product=product).order_by("-created_at")
        return success_response(
            data={
                "product": str(product.id),
                "ratings": RatingSerializer(ratings, many=True).data,
                **rating_summary(product),
            }
        )
