from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from moderation.gate import hide_review, unhide_review
from moderation.identity import caller_for
from moderation.results import result_response
from users.permissions import IsAdminRole

from .filters import ReviewFilter
from .selectors import has_user_reviewed, list_reviews, user_reviews, visible_to
from .serializers import ReviewInputSerializer, ReviewSerializer, ReviewVisibilitySerializer
from .services import delete_review, submit_review, update_review


class RestaurantReviewViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Reviews of one restaurant, newest first"""

    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get_queryset(self):
        return list_reviews(caller_for(self.request), self.kwargs["restaurant_pk"])

    def create(self, request, restaurant_pk=None):
        serializer = ReviewInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = submit_review(
            caller_for(request),
            restaurant_pk,
            serializer.validated_data.get("rating"),
            serializer.validated_data.get("comment", ""),
            files=request.FILES.getlist("images"),
        )
        return result_response(
            result,
            serialize=lambda review: ReviewSerializer(review).data,
            success_status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], permission_classes=[IsAuthenticated])
    def mine(self, request, restaurant_pk=None):
        """The caller's own review of this restaurant, or null"""
        review = has_user_reviewed(restaurant_pk, request.user.pk)
        return Response(ReviewSerializer(review).data if review else None)


class ReviewViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = ReviewFilter
    ordering_fields = ["created_at", "rating"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return visible_to(caller_for(self.request)).select_related("user", "restaurant")

    def update(self, request, pk=None):
        serializer = ReviewInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = update_review(
            caller_for(request),
            pk,
            rating=data.get("rating"),
            comment=data.get("comment"),
            files=request.FILES.getlist("images"),
            removed_images=data["removed_images"],
        )
        return result_response(result, serialize=lambda review: ReviewSerializer(review).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        return result_response(delete_review(caller_for(request), pk))

    @action(detail=True, methods=["post"])
    def hide(self, request, pk=None):
        serializer = ReviewVisibilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = hide_review(caller_for(request), pk, serializer.validated_data["admin_comment"])
        return result_response(result, serialize=lambda review: ReviewSerializer(review).data)

    @action(detail=True, methods=["post"])
    def unhide(self, request, pk=None):
        serializer = ReviewVisibilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = unhide_review(caller_for(request), pk, serializer.validated_data["admin_comment"])
        return result_response(result, serialize=lambda review: ReviewSerializer(review).data)

    @action(detail=False, methods=["get"], permission_classes=[IsAuthenticated])
    def mine(self, request):
        """Every review the caller wrote, hidden ones included"""
        queryset = user_reviews(caller_for(request))
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=["get"], permission_classes=[IsAdminRole])
    def admin(self, request):
        """All reviews, filterable by restaurant, rating and hidden flag"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)
