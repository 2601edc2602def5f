from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from django.conf import settings
from django.db import DatabaseError
from django.db.models import F
from django.utils import timezone

from moderation.exceptions import NotFoundError, RemoteWriteError, ValidationError
from restaurants.models import Restaurant

from .models import CorrectionReport

logger = logging.getLogger(__name__)

SCALAR_TARGETS = {
    CorrectionReport.FIELD_PET_POLICY: "pet_policy",
    CorrectionReport.FIELD_CONTACT_INFO: "contact_info",
    CorrectionReport.FIELD_ADDRESS: "address",
    CorrectionReport.FIELD_OTHER: "other_info",
}
APPEND_TARGETS = {
    CorrectionReport.FIELD_IMAGE: "gallery_images",
    CorrectionReport.FIELD_MENU: "menu_images",
}
LIST_TARGETS = {
    CorrectionReport.FIELD_CUISINE_TYPE: "cuisine_type",
}


@dataclass(frozen=True)
class MergePlan:
    restaurant_id: int
    field_name: str
    version: int
    changes: Dict[str, Any] = field(default_factory=dict)


def split_values(raw):
    """Comma-separated proposal to a list; blanks between commas are dropped."""
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def target_column(field_name):
    for targets in (SCALAR_TARGETS, APPEND_TARGETS, LIST_TARGETS):
        if field_name in targets:
            return targets[field_name]
    raise ValidationError(f"Corrections to '{field_name}' are not supported.", field_name=field_name)


def compute_changes(field_name, suggested_value, current):
    """
    Column updates for one correction given the restaurant's current values.

    ``current`` only needs the column being appended to.
    """
    column = target_column(field_name)

    if field_name in SCALAR_TARGETS:
        return {column: suggested_value}

    if field_name in LIST_TARGETS:
        return {column: split_values(suggested_value)}

    merged = list(current.get(column) or []) + split_values(suggested_value)
    changes = {column: merged}
    if column == "gallery_images":
        changes["image_url"] = Restaurant.cover_for(merged)
    return changes


def prepare(report):
    column = target_column(report.field_name)
    current = (
        Restaurant.objects.filter(pk=report.restaurant_id)
        .values("version", column)
        .first()
    )
    if current is None:
        raise NotFoundError("The restaurant for this correction no longer exists.")

    return MergePlan(
        restaurant_id=report.restaurant_id,
        field_name=report.field_name,
        version=current["version"],
        changes=compute_changes(report.field_name, report.suggested_value, current),
    )


def commit(plan, conditional=True):
    """
    Write ``plan``. Returns False when a conditional write found the row
    changed since ``prepare``.
    """
    queryset = Restaurant.objects.filter(pk=plan.restaurant_id)
    if conditional:
        queryset = queryset.filter(version=plan.version)

    try:
        updated = queryset.update(
            **plan.changes,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
    except DatabaseError as exc:
        logger.warning(f"Writing {plan.field_name} correction to restaurant {plan.restaurant_id} failed: {exc}")
        raise RemoteWriteError("Could not update the restaurant. Please try again.") from exc

    if not updated and not conditional:
        raise NotFoundError("The restaurant for this correction no longer exists.")
    return updated == 1


def apply(report):
    """Merge ``report`` into its restaurant and return the updated row."""
    conditional = settings.PETEATS["MERGE_CONDITIONAL_WRITES"]
    attempts = settings.PETEATS["MERGE_MAX_RETRIES"] if conditional else 1

    for attempt in range(1, attempts + 1):
        plan = prepare(report)
        if commit(plan, conditional=conditional):
            logger.info(
                f"Applied {report.field_name} correction {report.pk} to restaurant "
                f"{report.restaurant_id} (version {plan.version} -> {plan.version + 1})"
            )
            return Restaurant.objects.get(pk=report.restaurant_id)
        logger.debug(f"Restaurant {report.restaurant_id} changed during merge, retry {attempt}/{attempts}")

    raise RemoteWriteError(
        "The restaurant kept changing while the correction was applied. Please try again.",
        restaurant_id=report.restaurant_id,
    )
