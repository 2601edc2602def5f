import logging

from django.db import DatabaseError, transaction

from moderation.exceptions import NotFoundError, RemoteWriteError, ValidationError
from moderation.results import operation
from restaurants.models import Restaurant
from uploads.services import commit_uploads, store_uploads
from uploads.validators import IMAGE_TYPES, MENU_TYPES, validate_uploads

from .models import CorrectionReport

logger = logging.getLogger(__name__)

FIELD_NAMES = {choice for choice, _ in CorrectionReport.FIELD_CHOICES}
UPLOAD_RULES = {
    CorrectionReport.FIELD_IMAGE: ("reports", IMAGE_TYPES),
    CorrectionReport.FIELD_MENU: ("menus", MENU_TYPES),
}


def join_values(value):
    """Flatten a proposal to the stored comma-joined string."""
    if isinstance(value, (list, tuple)):
        return ",".join(str(item).strip() for item in value if str(item).strip())
    return (value or "").strip()


@operation("Thanks! Your correction has been sent for review.")
def create_report(actor, restaurant_id, field_name, suggested_value="", reason=None, files=()):
    """
    File a proposed change to one field of a published restaurant.

    Anyone may report, logged in or not. Photo and menu corrections upload
    their files first and store the resulting URLs comma-joined, after any
    URLs typed in directly.
    """
    files = list(files)
    if field_name not in FIELD_NAMES:
        raise ValidationError(f"'{field_name}' cannot be corrected.", field_name=field_name)
    if files and field_name not in UPLOAD_RULES:
        raise ValidationError("Files can only be attached to photo or menu corrections.")
    suggested_value = join_values(suggested_value)
    if not suggested_value and not files:
        raise ValidationError("Please tell us the correct value.")
    if files:
        validate_uploads(files, UPLOAD_RULES[field_name][1])

    try:
        restaurant = Restaurant.objects.get(pk=restaurant_id)
    except Restaurant.DoesNotExist:
        raise NotFoundError("Restaurant not found.")
    if not restaurant.is_approved:
        raise ValidationError("Corrections can only be sent for published restaurants.")

    urls = store_uploads(files, UPLOAD_RULES[field_name][0], actor) if files else []
    value = ",".join(part for part in [suggested_value, *urls] if part)

    report = CorrectionReport(
        restaurant=restaurant,
        user_id=actor.id,
        field_name=field_name,
        suggested_value=value,
        reason=(reason or "").strip() or None,
    )
    try:
        with transaction.atomic():
            report.save()
            commit_uploads(urls)
    except DatabaseError as exc:
        logger.warning(f"Saving {field_name} correction for restaurant {restaurant_id} failed: {exc}")
        raise RemoteWriteError("Could not send your correction. Please try again.") from exc

    logger.info(f"Correction {report.pk} ({field_name}) filed for restaurant {restaurant_id} by user {actor.id}")
    return report
