from rest_framework import serializers

from .models import Feedback


class FeedbackSerializer(serializers.ModelSerializer):
    class Meta:
        model = Feedback
        fields = ["id", "user", "type", "message", "contact_email", "page_url", "status", "created_at", "updated_at"]
        read_only_fields = fields


class FeedbackInputSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Feedback.TYPE_CHOICES, default="general")
    message = serializers.CharField()
    contact_email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    page_url = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)


class FeedbackStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Feedback.STATUS_CHOICES)
