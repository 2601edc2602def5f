from django.conf import settings
from django.db import models


class PendingUpload(models.Model):
    """
    A stored file whose URL has not been committed into any record yet.

    Rows are deleted once the owning record is saved; whatever is left behind
    after a failed submission is picked up by ``sweep_orphan_uploads``.
    """

    PURPOSES = (
        ("reviews", "Review image"),
        ("restaurants", "Restaurant image"),
        ("menus", "Menu file"),
        ("reports", "Correction report attachment"),
        ("pets", "Pet photo"),
    )

    path = models.CharField(max_length=500, unique=True)
    url = models.CharField(max_length=1000, db_index=True)
    purpose = models.CharField(max_length=20, choices=PURPOSES)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pending_uploads",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.purpose}: {self.path}"
