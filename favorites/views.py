from rest_framework import generics, permissions
from rest_framework.views import APIView

from moderation.identity import caller_for
from moderation.results import result_response

from .serializers import FavoriteSerializer, FavoriteToggleSerializer
from .services import toggle_favorite, user_favorites


class FavoriteListView(generics.ListAPIView):
    """The caller's favorite restaurants, most recently added first"""

    serializer_class = FavoriteSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return user_favorites(caller_for(self.request))

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["lang"] = self.request.query_params.get("lang")
        return context


class ToggleFavoriteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = FavoriteToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = toggle_favorite(caller_for(request), serializer.validated_data["restaurant_id"])
        return result_response(result)
