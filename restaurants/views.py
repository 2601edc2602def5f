from dataclasses import asdict

from django.db.models import Avg, Count, Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from favorites.services import favorite_count as count_favorites
from moderation.gate import approve_listing, reject_listing
from moderation.identity import caller_for
from moderation.results import result_response
from reviews.selectors import restaurant_rating
from users.permissions import IsAdminRoleOrReadOnly

from .filters import RestaurantFilter
from .models import CuisineType, PetPolicy
from .serializers import (
    CuisineTypeSerializer,
    ModerationSerializer,
    PetPolicySerializer,
    RestaurantSerializer,
    RestaurantSubmissionSerializer,
    RestaurantUpdateSerializer,
)
from .services import listings_for, submit_listing, update_listing


class LanguageContextMixin:
    def get_serializer_context(self):
        """Pass the requested display language to serializers"""
        context = super().get_serializer_context()
        context["lang"] = self.request.query_params.get("lang")
        return context


class RestaurantViewSet(
    LanguageContextMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Public directory of approved restaurants.

    Anyone may browse; logged-in users submit new places for review and
    administrators edit and moderate them.
    """

    serializer_class = RestaurantSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_class = RestaurantFilter
    search_fields = ["name", "name_zh", "name_pt", "address", "address_zh", "address_pt"]
    ordering_fields = ["name", "created_at", "average_rating", "review_count"]
    ordering = ["-created_at"]

    def get_queryset(self):
        visible_reviews = Q(reviews__is_hidden=False)
        return (
            listings_for(caller_for(self.request))
            .annotate(
                review_count=Count("reviews", filter=visible_reviews),
                average_rating=Avg("reviews__rating", filter=visible_reviews),
            )
            .select_related("submitted_by")
        )

    def _serialize(self, restaurant):
        return RestaurantSerializer(restaurant, context=self.get_serializer_context()).data

    def create(self, request, *args, **kwargs):
        serializer = RestaurantSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = submit_listing(
            caller_for(request),
            serializer.validated_data,
            cover_file=request.FILES.get("cover_image"),
            gallery_files=request.FILES.getlist("gallery_images"),
            menu_files=request.FILES.getlist("menu_files"),
        )
        return result_response(result, serialize=self._serialize, success_status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = RestaurantUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = update_listing(caller_for(request), kwargs["pk"], serializer.validated_data)
        return result_response(result, serialize=self._serialize)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        serializer = ModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = approve_listing(caller_for(request), pk, serializer.validated_data["admin_comment"])
        return result_response(result, serialize=self._serialize)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        serializer = ModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = reject_listing(caller_for(request), pk, serializer.validated_data["admin_comment"])
        return result_response(result, serialize=self._serialize)

    @action(detail=True, methods=["get"])
    def rating(self, request, pk=None):
        """Review count and average over visible reviews"""
        restaurant = self.get_object()
        return Response(asdict(restaurant_rating(restaurant.pk)))

    @action(detail=True, methods=["get"], url_path="favorite-count")
    def favorite_count(self, request, pk=None):
        restaurant = self.get_object()
        return Response({"restaurant_id": restaurant.pk, "favorite_count": count_favorites(restaurant.pk)})


class CuisineTypeViewSet(LanguageContextMixin, viewsets.ModelViewSet):
    queryset = CuisineType.objects.all()
    serializer_class = CuisineTypeSerializer
    permission_classes = [IsAdminRoleOrReadOnly]
    pagination_class = None


class PetPolicyViewSet(LanguageContextMixin, viewsets.ModelViewSet):
    queryset = PetPolicy.objects.all()
    serializer_class = PetPolicySerializer
    permission_classes = [IsAdminRoleOrReadOnly]
    pagination_class = None
