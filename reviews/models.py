from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from restaurants.models import Restaurant

MIN_RATING = 1
MAX_RATING = 5


class Review(models.Model):
    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)])
    comment = models.TextField(blank=True, default="")
    images = models.JSONField(default=list, blank=True)
    # legacy single-photo column, always images[0]
    image_url = models.CharField(max_length=1000, blank=True, default="")
    is_hidden = models.BooleanField(default=False, db_index=True)
    admin_comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        # one review per user and restaurant is checked by reviews.services, not here
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["restaurant", "user"])]

    def __str__(self):
        return f"{self.restaurant.name} - {self.rating}⭐ by {self.user.get_full_name()}"

    def save(self, *args, **kwargs):
        self.image_url = self.images[0] if self.images else ""
        super().save(*args, **kwargs)
