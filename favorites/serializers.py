from rest_framework import serializers

from restaurants.serializers import RestaurantSerializer

from .models import Favorite


class FavoriteSerializer(serializers.ModelSerializer):
    restaurant = RestaurantSerializer(read_only=True)

    class Meta:
        model = Favorite
        fields = ["id", "restaurant", "created_at"]


class FavoriteToggleSerializer(serializers.Serializer):
    restaurant_id = serializers.IntegerField()
