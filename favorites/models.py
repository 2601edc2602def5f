from django.conf import settings
from django.db import models

from restaurants.models import Restaurant


class Favorite(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favorites")
    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="favorited_by")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "restaurant"], name="unique_favorite_per_user"),
        ]

    def __str__(self):
        return f"{self.restaurant.name} in {self.user.email}'s favorites"
