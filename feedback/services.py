import logging

from django.contrib.auth import get_user_model
from django.db import DatabaseError

from moderation.exceptions import RemoteWriteError, ValidationError
from moderation.results import operation

from .models import Feedback

logger = logging.getLogger(__name__)

FEEDBACK_TYPES = {value for value, _ in Feedback.TYPE_CHOICES}


@operation("Thanks for your feedback!")
def submit_feedback(actor, message, feedback_type="general", contact_email=None, page_url=None):
    """Anyone can send feedback; signed-in users default to their account email."""
    message = (message or "").strip()
    if not message:
        raise ValidationError("Please write a message.", field="message")
    if feedback_type not in FEEDBACK_TYPES:
        raise ValidationError(f"Unknown feedback type '{feedback_type}'.", field="type")

    if not contact_email and actor.is_authenticated:
        contact_email = get_user_model().objects.filter(pk=actor.id).values_list("email", flat=True).first()

    try:
        feedback = Feedback.objects.create(
            user_id=actor.id,
            type=feedback_type,
            message=message,
            contact_email=contact_email or None,
            page_url=page_url or None,
        )
    except DatabaseError as exc:
        logger.warning(f"Saving feedback failed: {exc}")
        raise RemoteWriteError("Could not send your feedback. Please try again.") from exc

    logger.info(f"Feedback {feedback.pk} ({feedback_type}) received")
    return feedback
