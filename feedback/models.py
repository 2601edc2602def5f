from django.conf import settings
from django.db import models


class Feedback(models.Model):
    TYPE_CHOICES = (
        ("bug", "Bug"),
        ("feature", "Feature request"),
        ("general", "General"),
    )

    STATUS_PENDING = "pending"
    STATUS_REVIEWED = "reviewed"
    STATUS_RESOLVED = "resolved"
    STATUS_CHOICES = (
        (STATUS_PENDING, "Pending"),
        (STATUS_REVIEWED, "Reviewed"),
        (STATUS_RESOLVED, "Resolved"),
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="feedback"
    )
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default="general")
    message = models.TextField()
    contact_email = models.EmailField(blank=True, null=True)
    page_url = models.CharField(max_length=1000, blank=True, null=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "feedback"

    def __str__(self):
        return f"{self.get_type_display()}: {self.message[:40]}"
