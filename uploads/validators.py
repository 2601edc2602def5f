from django.conf import settings

from moderation.exceptions import ValidationError

IMAGE_TYPES = ("image/",)
MENU_TYPES = ("image/", "application/pdf")


def validate_file_size(file):
    max_bytes = settings.PETEATS["MAX_UPLOAD_BYTES"]
    if file.size > max_bytes:
        raise ValidationError(
            f"'{file.name}' is larger than {max_bytes // (1024 * 1024)} MB.",
            file=file.name,
        )


def validate_content_type(file, allowed=IMAGE_TYPES):
    content_type = getattr(file, "content_type", "") or ""
    if not content_type.startswith(allowed):
        raise ValidationError(f"'{file.name}' is not an accepted file type.", file=file.name)


def validate_uploads(files, allowed=IMAGE_TYPES):
    """Check every file up front so nothing is stored for an invalid batch."""
    for file in files:
        validate_file_size(file)
        validate_content_type(file, allowed)
