from django.conf import settings
from django.db import models


class Pet(models.Model):
    TYPE_DOG = "dog"
    TYPE_CAT = "cat"
    TYPE_BIRD = "bird"
    TYPE_RABBIT = "rabbit"
    TYPE_OTHER = "other"
    TYPE_CHOICES = (
        (TYPE_DOG, "Dog"),
        (TYPE_CAT, "Cat"),
        (TYPE_BIRD, "Bird"),
        (TYPE_RABBIT, "Rabbit"),
        (TYPE_OTHER, "Other"),
    )

    SIZE_CHOICES = (
        ("small", "Small (< 10kg)"),
        ("medium", "Medium (10-25kg)"),
        ("large", "Large (> 25kg)"),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="pets")
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_DOG)
    size = models.CharField(max_length=10, choices=SIZE_CHOICES)
    breed = models.CharField(max_length=100, blank=True, null=True)
    image_url = models.CharField(max_length=1000, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"
