# products/serializers/product.py

from decimal import Decimal

from rest_framework import serializers

from core.images import image_url, validate_image_extension
from products.models import Product
from products.serializers.category import CategorySummarySerializer
from store.serializers import StoreSummarySerializer


class ProductSerializer(serializers.ModelSerializer):
    """
    Product read/write serializer.

    Reference fields are written as ids (store, category, subcategory) and
    read back both as ids and as resolved `*_detail` objects, so clients never
    have to guess whether a field is populated.
    """

    image = serializers.FileField(
        write_only=True, required=False, validators=[validate_image_extension]
    )
    image_url = serializers.SerializerMethodField()
    in_stock = serializers.BooleanField(read_only=True)

    store_detail = StoreSummarySerializer(source="store", read_only=True)
    category_detail = CategorySummarySerializer(source="category", read_only=True)
    subcategory_detail = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "store",
            "store_detail",
            "category",
            "category_detail",
            "subcategory",
            "subcategory_detail",
            "name",
            "description",
            "price",
            "quantity",
            "in_stock",
            "image",
            "image_url",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def get_image_url(self, obj) -> str | None:
        return image_url(obj.image)

    def get_subcategory_detail(self, obj) -> dict | None:
        if not obj.subcategory_id:
            return None
        return {"id": str(obj.subcategory_id), "name": obj.subcategory.name}

    def validate_price(self, value):
        if value is None or Decimal(value) <= 0:
            raise serializers.ValidationError("Price must be greater than zero")
        return value

    def validate_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v

    def validate(self, attrs):
        category = attrs.get("category") or getattr(self.instance, "category", None)
        subcategory = attrs.get(
            "subcategory", getattr(self.instance, "subcategory", None)
        )
        if subcategory is not None and category is not None:
            if subcategory.category_id != category.id:
                raise serializers.ValidationError(
                    {"subcategory": "Subcategory does not belong to the selected category"}
                )
        return attrs


class ProductSummarySerializer(serializers.ModelSerializer):
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ["id", "name", "price", "quantity", "image_url", "store", "is_active"]
        read_only_fields = fields

    def get_image_url(self, obj) -> str | None:
        return image_url(obj.image)
