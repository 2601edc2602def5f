import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.core.files.storage import default_storage
from django.utils import timezone

from .models import PendingUpload

logger = logging.getLogger(__name__)


@shared_task
def sweep_orphan_uploads(max_age_hours=None):
    """
    Delete stored files that were never committed into a record.

    Run this every few hours via Celery Beat. Only ledger rows older than the
    TTL are considered so in-flight submissions are left alone.
    """
    if max_age_hours is None:
        max_age_hours = settings.PETEATS["ORPHAN_UPLOAD_TTL_HOURS"]
    cutoff = timezone.now() - timedelta(hours=max_age_hours)

    count = 0
    for upload in PendingUpload.objects.filter(created_at__lt=cutoff):
        try:
            default_storage.delete(upload.path)
        except OSError as exc:
            logger.warning(f"Could not delete orphaned upload {upload.path}: {exc}")
            continue
        upload.delete()
        count += 1

    logger.info(f"Removed {count} orphaned uploads older than {max_age_hours}h")
    return f"Removed {count} orphaned uploads"
