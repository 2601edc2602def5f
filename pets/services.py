import logging

from django.db import DatabaseError, transaction

from moderation.exceptions import NotFoundError, RemoteWriteError, ValidationError
from moderation.identity import require_authenticated
from moderation.results import operation
from uploads.services import commit_uploads, store_upload
from uploads.validators import validate_uploads

from .models import Pet

logger = logging.getLogger(__name__)

PET_FIELDS = ("name", "type", "size", "breed", "image_url")
PET_TYPES = {value for value, _ in Pet.TYPE_CHOICES}
PET_SIZES = {value for value, _ in Pet.SIZE_CHOICES}


def user_pets(actor):
    require_authenticated(actor)
    return Pet.objects.filter(user_id=actor.id)


def get_pet(actor, pet_id):
    # someone else's pet looks exactly like a missing one
    try:
        return user_pets(actor).get(pk=pet_id)
    except Pet.DoesNotExist:
        raise NotFoundError("Pet not found.")


def _clean(data, partial=False):
    fields = {field: data[field] for field in PET_FIELDS if field in data}

    if "name" in fields or not partial:
        fields["name"] = (fields.get("name") or "").strip()
        if not fields["name"]:
            raise ValidationError("Please give your pet a name.", field="name")
    if "type" in fields or not partial:
        fields["type"] = (fields.get("type") or "").strip().lower()
        if fields["type"] not in PET_TYPES:
            raise ValidationError(f"Unknown pet type '{fields['type']}'.", field="type")
    if "size" in fields or not partial:
        if fields.get("size") not in PET_SIZES:
            raise ValidationError("Pick a size: small, medium or large.", field="size")
    if "breed" in fields:
        fields["breed"] = (fields["breed"] or "").strip() or None
    return fields


def _save(pet, urls):
    try:
        with transaction.atomic():
            pet.save()
            commit_uploads(urls)
    except DatabaseError as exc:
        logger.warning(f"Saving pet for user {pet.user_id} failed: {exc}")
        raise RemoteWriteError("Could not save your pet. Please try again.") from exc


@operation("Pet added.")
def create_pet(actor, data, photo=None):
    require_authenticated(actor)
    fields = _clean(data)
    if photo is not None:
        validate_uploads([photo])
        fields["image_url"] = store_upload(photo, "pets", actor)

    pet = Pet(user_id=actor.id, **fields)
    _save(pet, [fields["image_url"]] if photo is not None else [])
    logger.info(f"User {actor.id} added pet {pet.pk}")
    return pet


@operation("Pet updated.")
def update_pet(actor, pet_id, data, photo=None):
    require_authenticated(actor)
    fields = _clean(data, partial=True)
    if photo is not None:
        validate_uploads([photo])
    pet = get_pet(actor, pet_id)

    urls = []
    if photo is not None:
        fields["image_url"] = store_upload(photo, "pets", actor)
        urls.append(fields["image_url"])
    for field, value in fields.items():
        setattr(pet, field, value)
    _save(pet, urls)
    return pet


@operation("Pet removed.")
def delete_pet(actor, pet_id):
    pet = get_pet(actor, pet_id)
    try:
        pet.delete()
    except DatabaseError as exc:
        raise RemoteWriteError("Could not remove your pet. Please try again.") from exc
    logger.info(f"User {actor.id} removed pet {pet_id}")
