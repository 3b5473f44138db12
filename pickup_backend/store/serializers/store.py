from rest_framework import serializers

from core.images import image_url, validate_image_extension
from store.models import Store


class StoreSerializer(serializers.ModelSerializer):
    image = serializers.FileField(
        write_only=True, required=False, validators=[validate_image_extension]
    )
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = Store
        fields = [
            "id",
            "name",
            "location",
            "pickup_instructions",
            "image",
            "image_url",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def get_image_url(self, obj) -> str | None:
        return image_url(obj.image)


class StoreSummarySerializer(serializers.ModelSerializer):
    """
    Nested (resolved) form used inside orders and products.
    """

    class Meta:
        model = Store
        fields = ["id", "name", "location", "pickup_instructions"]
        read_only_fields = fields
