from django.conf import settings
from django.db import models

from restaurants.models import Restaurant


class CorrectionReport(models.Model):
    FIELD_PET_POLICY = "pet_policy"
    FIELD_CONTACT_INFO = "contact_info"
    FIELD_ADDRESS = "address"
    FIELD_CUISINE_TYPE = "cuisine_type"
    FIELD_IMAGE = "image"
    FIELD_MENU = "menu"
    FIELD_OTHER = "other"
    FIELD_CHOICES = (
        (FIELD_PET_POLICY, "Pet policy"),
        (FIELD_CONTACT_INFO, "Contact info"),
        (FIELD_ADDRESS, "Address"),
        (FIELD_CUISINE_TYPE, "Cuisine type"),
        (FIELD_IMAGE, "Photos"),
        (FIELD_MENU, "Menu"),
        (FIELD_OTHER, "Other"),
    )
    FILE_FIELDS = (FIELD_IMAGE, FIELD_MENU)

    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_CHOICES = (
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    )

    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="reports")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="correction_reports",
    )
    field_name = models.CharField(max_length=20, choices=FIELD_CHOICES)
    # multi-value proposals (photos, menu files, cuisines) are comma-joined
    suggested_value = models.TextField()
    reason = models.TextField(blank=True, null=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="moderated_reports",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    admin_comment = models.TextField(blank=True, null=True)
    # claimed while a moderator runs the merge, applied once the restaurant write lands
    merge_claimed = models.BooleanField(default=False)
    merge_applied = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.restaurant.name} - {self.get_field_name_display()} ({self.status})"
