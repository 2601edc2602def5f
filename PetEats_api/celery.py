import os
from datetime import timedelta

from celery import Celery
from django.conf import settings

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "PetEats_api.settings")

celery = Celery("PetEats_api")
celery.config_from_object("django.conf:settings", namespace="CELERY")
celery.autodiscover_tasks()


@celery.on_after_finalize.connect
def schedule_periodic_tasks(sender, **kwargs):
    from uploads.tasks import sweep_orphan_uploads

    sender.add_periodic_task(
        timedelta(hours=settings.PETEATS["ORPHAN_SWEEP_INTERVAL_HOURS"]),
        sweep_orphan_uploads.s(),
        name="sweep-orphan-uploads",
    )
