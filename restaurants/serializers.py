from rest_framework import serializers

from .localization import localized_listing, resolve_catalog_name
from .models import CuisineType, PetPolicy, Restaurant
from .services import SUBMISSION_FIELDS


class CatalogEntrySerializer(serializers.ModelSerializer):
    label = serializers.SerializerMethodField()

    class Meta:
        fields = ["id", "name", "name_zh", "name_pt", "sort_order", "label"]

    def get_label(self, obj):
        return resolve_catalog_name(obj, self.context.get("lang"))


class CuisineTypeSerializer(CatalogEntrySerializer):
    class Meta(CatalogEntrySerializer.Meta):
        model = CuisineType


class PetPolicySerializer(CatalogEntrySerializer):
    class Meta(CatalogEntrySerializer.Meta):
        model = PetPolicy


class RestaurantSerializer(serializers.ModelSerializer):
    submitted_by_name = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()
    average_rating = serializers.SerializerMethodField()
    localized = serializers.SerializerMethodField()

    class Meta:
        model = Restaurant
        fields = [
            "id",
            "name",
            "name_zh",
            "name_pt",
            "description",
            "description_zh",
            "description_pt",
            "address",
            "address_zh",
            "address_pt",
            "cuisine_type",
            "cuisine_type_zh",
            "cuisine_type_pt",
            "pet_policy",
            "contact_info",
            "other_info",
            "latitude",
            "longitude",
            "image_url",
            "gallery_images",
            "menu_images",
            "opening_hours",
            "social_media",
            "status",
            "admin_comment",
            "submitted_by",
            "submitted_by_name",
            "reviewed_at",
            "review_count",
            "average_rating",
            "localized",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_submitted_by_name(self, obj):
        user = obj.submitted_by
        return user.get_full_name() if user else None

    def get_review_count(self, obj):
        return getattr(obj, "review_count", None)

    def get_average_rating(self, obj):
        value = getattr(obj, "average_rating", None)
        return round(float(value), 2) if value is not None else None

    def get_localized(self, obj):
        """Resolved text for ``?lang=``; omitted when no language was asked for."""
        lang = self.context.get("lang")
        if not lang:
            return None
        return localized_listing(obj, lang)


class RestaurantSubmissionSerializer(serializers.ModelSerializer):
    """
    Validates the visitor submission form.

    Files are read straight from ``request.FILES`` by the view:
    ``cover_image``, ``gallery_images`` and ``menu_files``.
    """

    cuisine_type = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False, default=list
    )
    cuisine_type_other = serializers.CharField(max_length=100, required=False, allow_blank=True)

    class Meta:
        model = Restaurant
        fields = [*SUBMISSION_FIELDS, "cuisine_type", "cuisine_type_other"]

    def validate(self, data):
        if "Other" in data.get("cuisine_type", []) and not data.get("cuisine_type_other", "").strip():
            raise serializers.ValidationError({"cuisine_type_other": "Please describe the cuisine."})
        return data


class RestaurantUpdateSerializer(RestaurantSubmissionSerializer):
    cuisine_type = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    gallery_images = serializers.ListField(child=serializers.CharField(max_length=1000), required=False)
    menu_images = serializers.ListField(child=serializers.CharField(max_length=1000), required=False)
    version = serializers.IntegerField(required=False, min_value=0)

    class Meta(RestaurantSubmissionSerializer.Meta):
        fields = [*RestaurantSubmissionSerializer.Meta.fields, "gallery_images", "menu_images", "version"]


class ModerationSerializer(serializers.Serializer):
    admin_comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
