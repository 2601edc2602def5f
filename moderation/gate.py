import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from feedback.models import Feedback
from reports import merge
from reports.models import CorrectionReport
from restaurants.models import Restaurant
from reviews.models import Review

from .exceptions import InvalidTransitionError, NotFoundError, RemoteWriteError, ValidationError
from .identity import require_admin
from .results import operation

logger = logging.getLogger(__name__)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


def _get(model, pk, label):
    try:
        return model.objects.get(pk=pk)
    except model.DoesNotExist:
        raise NotFoundError(f"{label.capitalize()} not found.")


def _ensure_pending(obj, label):
    if obj.status != PENDING:
        raise InvalidTransitionError(f"This {label} has already been {obj.status}.", status=obj.status)


def _write(queryset, changes, label, pk):
    try:
        return queryset.update(**changes)
    except DatabaseError as exc:
        logger.warning(f"Moderation write on {label} {pk} failed: {exc}")
        raise RemoteWriteError(f"Could not update the {label}. Please try again.") from exc


def _finish(model, obj, target, actor, admin_comment, label, **guard):
    """
    Move ``obj`` out of ``pending``.

    The write only matches a row that is still pending, so a concurrent
    moderator cannot be overwritten.
    """
    changes = {"status": target, "reviewed_by_id": actor.id, "reviewed_at": timezone.now()}
    if admin_comment is not None:
        changes["admin_comment"] = admin_comment
    if model is Restaurant:
        changes["updated_at"] = changes["reviewed_at"]

    queryset = model.objects.filter(pk=obj.pk, status=PENDING, **guard)
    if not _write(queryset, changes, label, obj.pk):
        raise InvalidTransitionError(f"This {label} was moderated by someone else in the meantime.")

    obj.refresh_from_db()
    logger.info(f"Admin {actor.id} {target} {label} {obj.pk}")
    return obj


@operation("Restaurant approved.")
def approve_listing(actor, restaurant_id, admin_comment=None):
    require_admin(actor)
    restaurant = _get(Restaurant, restaurant_id, "restaurant")
    _ensure_pending(restaurant, "restaurant")
    return _finish(Restaurant, restaurant, APPROVED, actor, admin_comment, "restaurant")


@operation("Restaurant rejected.")
def reject_listing(actor, restaurant_id, admin_comment=None):
    require_admin(actor)
    restaurant = _get(Restaurant, restaurant_id, "restaurant")
    _ensure_pending(restaurant, "restaurant")
    return _finish(Restaurant, restaurant, REJECTED, actor, admin_comment, "restaurant")


def _claim_merge(report):
    """Only the caller that flips ``merge_claimed`` on a pending report runs the merge."""
    queryset = CorrectionReport.objects.filter(pk=report.pk, status=PENDING, merge_claimed=False)
    return _write(queryset, {"merge_claimed": True}, "correction", report.pk) == 1


def _release_merge(report):
    try:
        CorrectionReport.objects.filter(pk=report.pk, merge_applied=False).update(merge_claimed=False)
    except DatabaseError as exc:
        logger.error(f"Could not release merge claim on correction {report.pk}: {exc}")


def _run_merge(report):
    # the restaurant change and the applied flag land together or not at all
    with transaction.atomic():
        merge.apply(report)
        _write(
            CorrectionReport.objects.filter(pk=report.pk),
            {"merge_applied": True},
            "correction",
            report.pk,
        )


@operation("Correction approved and applied.")
def approve_report(actor, report_id, admin_comment=None):
    """
    Apply the correction to its restaurant, then mark it approved.

    The restaurant write and the status write are independent. When the
    restaurant write succeeds and the status write fails, the caller gets a
    ``RemoteWriteError`` and the restaurant keeps the change; approving again
    only finishes the status write. While another moderator's merge is still
    running the approval is refused.
    """
    require_admin(actor)
    report = _get(CorrectionReport, report_id, "correction")
    _ensure_pending(report, "correction")

    if not report.merge_applied:
        if not _claim_merge(report):
            report.refresh_from_db()
            _ensure_pending(report, "correction")
            if not report.merge_applied:
                raise InvalidTransitionError("This correction is being applied by another moderator.")
        else:
            try:
                _run_merge(report)
            except Exception:
                _release_merge(report)
                raise
    else:
        logger.info(f"Correction {report.pk} was already merged, only recording the approval")

    return _finish(CorrectionReport, report, APPROVED, actor, admin_comment, "correction", merge_applied=True)


@operation("Correction rejected.")
def reject_report(actor, report_id, admin_comment=None):
    require_admin(actor)
    report = _get(CorrectionReport, report_id, "correction")
    _ensure_pending(report, "correction")
    if report.merge_claimed:
        state = "has already been" if report.merge_applied else "is being"
        raise InvalidTransitionError(f"This correction {state} applied to the restaurant.")
    return _finish(CorrectionReport, report, REJECTED, actor, admin_comment, "correction", merge_claimed=False)


def _set_visibility(actor, review_id, hidden, admin_comment):
    review = _get(Review, review_id, "review")
    changes = {"is_hidden": hidden, "admin_comment": admin_comment, "updated_at": timezone.now()}
    _write(Review.objects.filter(pk=review.pk), changes, "review", review.pk)
    review.refresh_from_db()
    logger.info(f"Admin {actor.id} {'hid' if hidden else 'unhid'} review {review.pk}")
    return review


@operation("Review hidden.")
def hide_review(actor, review_id, admin_comment=None):
    """Hide a review from everyone but its author. The comment replaces any previous one."""
    require_admin(actor)
    return _set_visibility(actor, review_id, True, admin_comment)


@operation("Review visible again.")
def unhide_review(actor, review_id, admin_comment=None):
    require_admin(actor)
    return _set_visibility(actor, review_id, False, admin_comment)


@operation("Feedback status updated.")
def set_feedback_status(actor, feedback_id, status):
    """Feedback moves freely between pending, reviewed and resolved."""
    require_admin(actor)
    if status not in {value for value, _ in Feedback.STATUS_CHOICES}:
        raise ValidationError(f"Unknown feedback status '{status}'.", status=status)
    feedback = _get(Feedback, feedback_id, "feedback")
    _write(
        Feedback.objects.filter(pk=feedback.pk),
        {"status": status, "updated_at": timezone.now()},
        "feedback",
        feedback.pk,
    )
    feedback.refresh_from_db()
    logger.info(f"Admin {actor.id} marked feedback {feedback.pk} {status}")
    return feedback
