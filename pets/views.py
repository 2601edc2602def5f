from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated

from moderation.identity import caller_for
from moderation.results import result_response

from .serializers import PetInputSerializer, PetSerializer
from .services import create_pet, delete_pet, update_pet, user_pets


def _serialize(pet):
    return PetSerializer(pet).data


class PetViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """The caller's pet profiles"""

    serializer_class = PetSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return user_pets(caller_for(self.request))

    def create(self, request):
        serializer = PetInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = create_pet(caller_for(request), serializer.validated_data, photo=request.FILES.get("photo"))
        return result_response(result, serialize=_serialize, success_status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = PetInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = update_pet(caller_for(request), pk, serializer.validated_data, photo=request.FILES.get("photo"))
        return result_response(result, serialize=_serialize)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        return result_response(delete_pet(caller_for(request), pk))
