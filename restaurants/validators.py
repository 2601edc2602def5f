import re

from django.core.exceptions import ValidationError
from django.core.validators import URLValidator

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
SOCIAL_NETWORKS = ("website", "facebook", "instagram", "xiaohongshu", "tiktok")

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_opening_hours(value):
    """
    ``{"monday": {"open": "09:00", "close": "18:00"}, "sunday": None, ...}``

    A missing or ``None`` weekday means closed that day.
    """
    if value in (None, ""):
        return
    if not isinstance(value, dict):
        raise ValidationError("Opening hours must be an object keyed by weekday.")

    for day, hours in value.items():
        if day not in WEEKDAYS:
            raise ValidationError(f"Unknown weekday '{day}'.")
        if hours is None:
            continue
        if not isinstance(hours, dict) or set(hours) != {"open", "close"}:
            raise ValidationError(f"Hours for {day} need exactly 'open' and 'close'.")
        for key in ("open", "close"):
            if not isinstance(hours[key], str) or not TIME_PATTERN.match(hours[key]):
                raise ValidationError(f"'{hours[key]}' is not a valid HH:MM time for {day}.")


def validate_social_media(value):
    if value in (None, ""):
        return
    if not isinstance(value, dict):
        raise ValidationError("Social media must be an object keyed by network.")

    check_url = URLValidator(schemes=["http", "https"])
    for network, url in value.items():
        if network not in SOCIAL_NETWORKS:
            raise ValidationError(f"Unsupported social network '{network}'.")
        if not url:
            continue
        if not isinstance(url, str):
            raise ValidationError(f"Link for {network} must be a URL.")
        check_url(url)
