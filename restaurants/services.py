import logging

from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from moderation.exceptions import InvalidTransitionError, NotFoundError, RemoteWriteError, ValidationError
from moderation.identity import require_admin, require_authenticated
from moderation.results import operation
from uploads.services import commit_uploads, store_uploads
from uploads.validators import IMAGE_TYPES, MENU_TYPES, validate_uploads

from .localization import cuisine_mirrors, expand_other_cuisine
from .models import Restaurant

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "address")

SUBMISSION_FIELDS = (
    "name",
    "name_zh",
    "name_pt",
    "description",
    "description_zh",
    "description_pt",
    "address",
    "address_zh",
    "address_pt",
    "pet_policy",
    "contact_info",
    "other_info",
    "latitude",
    "longitude",
    "opening_hours",
    "social_media",
)
EDITABLE_FIELDS = SUBMISSION_FIELDS + ("gallery_images", "menu_images")


def listings_for(actor):
    """Visitors only ever see approved listings; admins see every status."""
    queryset = Restaurant.objects.all()
    if actor.is_admin:
        return queryset
    return queryset.filter(status=Restaurant.STATUS_APPROVED)


def get_listing(actor, restaurant_id):
    try:
        return listings_for(actor).get(pk=restaurant_id)
    except Restaurant.DoesNotExist:
        raise NotFoundError("Restaurant not found.")


def _check_required(data, partial=False):
    missing = [
        field
        for field in REQUIRED_FIELDS
        if (not partial or field in data) and not str(data.get(field) or "").strip()
    ]
    if missing:
        raise ValidationError(f"Please fill in: {', '.join(missing)}.", fields=missing)


def _cuisine_fields(data):
    keys = expand_other_cuisine(data.get("cuisine_type") or [], data.get("cuisine_type_other"))
    return {"cuisine_type": keys, **cuisine_mirrors(keys)}


@operation("Thanks! Your restaurant has been submitted for review.")
def submit_listing(actor, data, cover_file=None, gallery_files=(), menu_files=()):
    """
    Create a pending listing from a visitor submission.

    Files are uploaded first, then the row is written together with the
    ledger commit. If the row write fails the uploaded files are left to the
    orphan sweep.
    """
    require_authenticated(actor)
    _check_required(data)
    image_files = ([cover_file] if cover_file else []) + list(gallery_files)
    menu_files = list(menu_files)
    validate_uploads(image_files, IMAGE_TYPES)
    validate_uploads(menu_files, MENU_TYPES)

    fields = {field: data[field] for field in SUBMISSION_FIELDS if field in data}
    fields.update(_cuisine_fields(data))

    gallery = store_uploads(image_files, "restaurants", actor)
    menu = store_uploads(menu_files, "menus", actor)

    restaurant = Restaurant(
        **fields,
        gallery_images=gallery,
        menu_images=menu,
        status=Restaurant.STATUS_PENDING,
        submitted_by_id=actor.id,
    )
    try:
        with transaction.atomic():
            restaurant.save()
            commit_uploads(gallery + menu)
    except DatabaseError as exc:
        logger.warning(f"Saving submission '{fields.get('name')}' failed after {len(gallery + menu)} uploads: {exc}")
        raise RemoteWriteError("Could not save the restaurant. Please try again.") from exc

    logger.info(f"Restaurant {restaurant.pk} submitted by user {actor.id}")
    return restaurant


def _edit_changes(data):
    changes = {field: data[field] for field in EDITABLE_FIELDS if field in data}
    if "cuisine_type" in data:
        changes.update(_cuisine_fields(data))
    if "gallery_images" in changes:
        changes["image_url"] = Restaurant.cover_for(changes["gallery_images"])
    return changes


@operation("Restaurant updated.")
def update_listing(actor, restaurant_id, data):
    """
    Admin full-form edit.

    Only the submitted columns are written, so a concurrent approval or merged
    correction survives unless the form replaces that same column. When the
    form sends the ``version`` it was loaded at, a restaurant changed since
    then is a conflict instead of an overwrite.

    Unlike a merged correction, editing the cuisine list recomputes its
    mirrors from the catalog so the three arrays stay index-aligned.
    """
    require_admin(actor)
    _check_required(data, partial=True)
    changes = _edit_changes(data)

    queryset = Restaurant.objects.filter(pk=restaurant_id)
    expected_version = data.get("version")
    if expected_version is not None:
        queryset = queryset.filter(version=expected_version)

    try:
        updated = queryset.update(**changes, version=F("version") + 1, updated_at=timezone.now())
    except DatabaseError as exc:
        logger.warning(f"Editing restaurant {restaurant_id} failed: {exc}")
        raise RemoteWriteError("Could not save the restaurant. Please try again.") from exc

    if not updated:
        current = Restaurant.objects.filter(pk=restaurant_id).values_list("version", flat=True).first()
        if current is None:
            raise NotFoundError("Restaurant not found.")
        raise InvalidTransitionError(
            "This restaurant was changed by someone else. Reload it and try again.",
            version=current,
        )

    logger.info(f"Restaurant {restaurant_id} edited by admin {actor.id} ({', '.join(sorted(changes)) or 'no fields'})")
    return Restaurant.objects.get(pk=restaurant_id)
