from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny

from moderation.gate import approve_report, reject_report
from moderation.identity import caller_for
from moderation.results import result_response
from restaurants.serializers import ModerationSerializer
from users.permissions import IsAdminRole

from .filters import CorrectionReportFilter
from .models import CorrectionReport
from .serializers import CorrectionReportInputSerializer, CorrectionReportSerializer
from .services import create_report


def _serialize(report):
    return CorrectionReportSerializer(report).data


class RestaurantReportViewSet(viewsets.GenericViewSet):
    """Anyone can suggest a correction to a published restaurant"""

    serializer_class = CorrectionReportInputSerializer
    permission_classes = [AllowAny]

    def create(self, request, restaurant_pk=None):
        serializer = CorrectionReportInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = create_report(
            caller_for(request),
            restaurant_pk,
            data["field_name"],
            suggested_value=data["suggested_value"],
            reason=data.get("reason"),
            files=request.FILES.getlist("files"),
        )
        return result_response(result, serialize=_serialize, success_status=status.HTTP_201_CREATED)


class CorrectionReportViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = CorrectionReport.objects.select_related("restaurant", "user", "reviewed_by")
    serializer_class = CorrectionReportSerializer
    permission_classes = [IsAdminRole]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = CorrectionReportFilter
    ordering_fields = ["created_at", "status"]
    ordering = ["-created_at"]

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        serializer = ModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = approve_report(caller_for(request), pk, serializer.validated_data["admin_comment"])
        return result_response(result, serialize=_serialize)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        serializer = ModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = reject_report(caller_for(request), pk, serializer.validated_data["admin_comment"])
        return result_response(result, serialize=_serialize)
