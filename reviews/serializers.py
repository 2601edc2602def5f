from rest_framework import serializers

from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    restaurant_name = serializers.CharField(source="restaurant.name", read_only=True)
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            "id",
            "restaurant",
            "restaurant_name",
            "user",
            "user_name",
            "rating",
            "comment",
            "images",
            "image_url",
            "is_hidden",
            "admin_comment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_user_name(self, obj):
        return obj.user.get_full_name() or obj.user.username


class ReviewInputSerializer(serializers.Serializer):
    """
    Shape of the review form. The rating range is checked by the service
    so it is rejected before any upload starts. Photos come from
    ``request.FILES.getlist("images")``.
    """

    rating = serializers.IntegerField(required=False)
    comment = serializers.CharField(required=False, allow_blank=True)
    removed_images = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class ReviewVisibilitySerializer(serializers.Serializer):
    admin_comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
