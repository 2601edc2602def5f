from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .validators import validate_opening_hours, validate_social_media


class CatalogEntry(models.Model):
    """Shared shape of the taxonomy catalogs: an English key plus mirrors."""

    name = models.CharField(max_length=100, unique=True)
    name_zh = models.CharField(max_length=100, blank=True, null=True)
    name_pt = models.CharField(max_length=100, blank=True, null=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True
        ordering = ["sort_order", "name"]

    def __str__(self):
        return self.name


class CuisineType(CatalogEntry):
    class Meta(CatalogEntry.Meta):
        verbose_name_plural = "Cuisine Types"


class PetPolicy(CatalogEntry):
    class Meta(CatalogEntry.Meta):
        verbose_name_plural = "Pet Policies"


class Restaurant(models.Model):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_CHOICES = (
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    )

    name = models.CharField(max_length=255)
    name_zh = models.CharField(max_length=255, blank=True, null=True)
    name_pt = models.CharField(max_length=255, blank=True, null=True)
    description = models.TextField(blank=True, default="")
    description_zh = models.TextField(blank=True, null=True)
    description_pt = models.TextField(blank=True, null=True)
    address = models.TextField()
    address_zh = models.TextField(blank=True, null=True)
    address_pt = models.TextField(blank=True, null=True)

    cuisine_type = models.JSONField(default=list, blank=True)
    cuisine_type_zh = models.JSONField(default=list, blank=True)
    cuisine_type_pt = models.JSONField(default=list, blank=True)

    pet_policy = models.CharField(max_length=100, blank=True, default="")
    contact_info = models.CharField(max_length=255, blank=True, default="")
    other_info = models.TextField(blank=True, default="")
    latitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
    )
    longitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
    )

    # gallery_images[0] is the cover; image_url is the legacy single-cover column
    image_url = models.CharField(max_length=1000, blank=True, default="")
    gallery_images = models.JSONField(default=list, blank=True)
    menu_images = models.JSONField(default=list, blank=True)
    opening_hours = models.JSONField(default=dict, blank=True, validators=[validate_opening_hours])
    social_media = models.JSONField(default=dict, blank=True, validators=[validate_social_media])

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    admin_comment = models.TextField(blank=True, null=True)
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="submitted_restaurants",
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="moderated_restaurants",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status", "-created_at"])]

    def __str__(self):
        return self.name

    @property
    def is_approved(self):
        return self.status == self.STATUS_APPROVED

    @staticmethod
    def cover_for(gallery_images):
        return gallery_images[0] if gallery_images else ""

    def save(self, *args, **kwargs):
        self.image_url = self.cover_for(self.gallery_images)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "gallery_images" in update_fields:
            kwargs["update_fields"] = {*update_fields, "image_url"}
        super().save(*args, **kwargs)
