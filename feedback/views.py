from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny

from moderation.gate import set_feedback_status
from moderation.identity import caller_for
from moderation.results import result_response
from users.permissions import IsAdminRole

from .filters import FeedbackFilter
from .models import Feedback
from .serializers import FeedbackInputSerializer, FeedbackSerializer, FeedbackStatusSerializer
from .services import submit_feedback


def _serialize(feedback):
    return FeedbackSerializer(feedback).data


class FeedbackViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Anyone can post; only admins read and triage."""

    queryset = Feedback.objects.select_related("user")
    serializer_class = FeedbackSerializer
    permission_classes = [IsAdminRole]
    filter_backends = [DjangoFilterBackend]
    filterset_class = FeedbackFilter

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        return super().get_permissions()

    def create(self, request):
        serializer = FeedbackInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = submit_feedback(
            caller_for(request),
            data["message"],
            feedback_type=data["type"],
            contact_email=data.get("contact_email"),
            page_url=data.get("page_url"),
        )
        return result_response(result, serialize=_serialize, success_status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = FeedbackStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = set_feedback_status(caller_for(request), pk, serializer.validated_data["status"])
        return result_response(result, serialize=_serialize)
