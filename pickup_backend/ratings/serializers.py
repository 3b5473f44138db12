# ratings/serializers.py

from rest_framework import serializers

from products.models import Product
from ratings.models import Rating
from users.serializers import UserSummarySerializer


class RatingSerializer(serializers.ModelSerializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.filter(is_active=True))
    user_detail = UserSummarySerializer(source="user", read_only=True)
    rating = serializers.IntegerField(min_value=Rating.MIN_RATING, max_value=Rating.MAX_RATING)

    class Meta:
        model = Rating
        fields = [
            "id",
            "product",
            "user",
            "user_detail",
            "rating",
            "review",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "user", "user_detail", "created_at", "updated_at"]

    def validate_review(self, value):
        return (value or "").strip()

    def validate(self, attrs):
        request = self.context.get("request")
        product = attrs.get("product")

        # Product is fixed once rated.
        if self.instance is not None and product is not None and product != self.instance.product:
            raise serializers.ValidationError({"product": "Product of a rating cannot be changed"})

        if self.instance is None and request is not None and product is not None:
            if Rating.objects.filter(user=request.user, product=product).exists():
                raise serializers.ValidationError(
                    {"product": "You have already rated this product"}
                )
        return attrs
