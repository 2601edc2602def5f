from rest_framework import serializers

from .models import Pet


class PetSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pet
        fields = ["id", "name", "type", "size", "breed", "image_url", "created_at", "updated_at"]
        read_only_fields = fields


class PetInputSerializer(serializers.Serializer):
    """Choices are checked by the service; a photo comes in as ``photo``."""

    name = serializers.CharField(max_length=100, required=False)
    type = serializers.CharField(max_length=20, required=False)
    size = serializers.CharField(max_length=10, required=False)
    breed = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    image_url = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
