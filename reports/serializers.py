from rest_framework import serializers

from .models import CorrectionReport


class CorrectionReportSerializer(serializers.ModelSerializer):
    restaurant_name = serializers.CharField(source="restaurant.name", read_only=True)
    reporter_email = serializers.SerializerMethodField()

    class Meta:
        model = CorrectionReport
        fields = [
            "id",
            "restaurant",
            "restaurant_name",
            "user",
            "reporter_email",
            "field_name",
            "suggested_value",
            "reason",
            "status",
            "reviewed_by",
            "reviewed_at",
            "admin_comment",
            "merge_applied",
            "created_at",
        ]
        read_only_fields = fields

    def get_reporter_email(self, obj):
        return obj.user.email if obj.user else None


class SuggestedValueField(serializers.Field):
    """Text, or a list of text values that the service comma-joins."""

    default_error_messages = {"invalid": "Expected text or a list of text values."}

    def to_internal_value(self, data):
        if isinstance(data, str):
            return data
        if isinstance(data, list) and all(isinstance(item, str) for item in data):
            return data
        self.fail("invalid")

    def to_representation(self, value):
        return value


class CorrectionReportInputSerializer(serializers.Serializer):
    """Photo and menu files come from ``request.FILES.getlist("files")``."""

    field_name = serializers.ChoiceField(choices=CorrectionReport.FIELD_CHOICES)
    suggested_value = SuggestedValueField(required=False, default="")
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
