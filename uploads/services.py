import logging
import os
from uuid import uuid4

from django.core.files.storage import default_storage
from django.db import DatabaseError

from moderation.exceptions import RemoteWriteError

from .models import PendingUpload

logger = logging.getLogger(__name__)


def generate_path(prefix, filename):
    """Collision-resistant storage path that keeps the original extension."""
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{prefix}/{uuid4().hex}{ext}"


def store_upload(file, prefix, actor=None):
    """
    Write ``file`` to storage and record it in the upload ledger.

    Returns the public URL. The URL stays in the ledger until
    ``commit_uploads`` is called for it.
    """
    path = generate_path(prefix, file.name)
    try:
        name = default_storage.save(path, file)
        url = default_storage.url(name)
    except Exception as exc:
        logger.error(f"Upload of {file.name} to {path} failed: {exc}")
        raise RemoteWriteError(f"Could not upload '{file.name}'.") from exc

    try:
        PendingUpload.objects.create(
            path=name,
            url=url,
            purpose=prefix,
            uploaded_by_id=getattr(actor, "id", None),
        )
    except DatabaseError as exc:
        logger.error(f"Could not record pending upload {name}: {exc}")
        raise RemoteWriteError(f"Could not upload '{file.name}'.") from exc

    return url


def store_uploads(files, prefix, actor=None):
    """
    Upload files one after another, collecting their URLs in order.

    A failure aborts the batch; files stored before it stay in the ledger.
    """
    urls = []
    for file in files:
        urls.append(store_upload(file, prefix, actor))
    return urls


def commit_uploads(urls):
    """
    Mark URLs as referenced by a saved record.

    Call it inside the same ``transaction.atomic()`` block as the record
    write so the ledger never claims a referenced file is orphaned.
    """
    if not urls:
        return 0
    deleted, _ = PendingUpload.objects.filter(url__in=list(urls)).delete()
    return deleted
