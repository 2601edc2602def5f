import logging

from django.db import DatabaseError, transaction

from moderation.exceptions import AuthorizationError, NotFoundError, RemoteWriteError, ValidationError
from moderation.identity import require_authenticated
from moderation.results import operation
from restaurants.models import Restaurant
from uploads.services import commit_uploads, store_uploads
from uploads.validators import validate_uploads

from .models import MAX_RATING, MIN_RATING, Review
from .selectors import has_user_reviewed

logger = logging.getLogger(__name__)


def validate_rating(rating):
    message = f"Rating must be a whole number from {MIN_RATING} to {MAX_RATING}."
    if isinstance(rating, bool) or (isinstance(rating, float) and not rating.is_integer()):
        raise ValidationError(message, rating=rating)
    try:
        value = int(rating)
    except (TypeError, ValueError):
        raise ValidationError(message, rating=rating)
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError(message, rating=rating)
    return value


def _save_with_uploads(review, urls, action):
    try:
        with transaction.atomic():
            review.save()
            commit_uploads(urls)
    except DatabaseError as exc:
        logger.warning(f"Could not {action} review for restaurant {review.restaurant_id} after {len(urls)} uploads: {exc}")
        raise RemoteWriteError("Could not save your review. Please try again.") from exc


@operation("Thanks for your review!")
def submit_review(actor, restaurant_id, rating, comment="", files=()):
    """
    Post the caller's review of a published restaurant.

    Input is checked before anything is read or uploaded. Photos are
    uploaded one at a time; if one fails no review is written and the
    photos already stored are left to the orphan sweep.
    """
    require_authenticated(actor)
    rating = validate_rating(rating)
    files = list(files)
    validate_uploads(files)

    if not Restaurant.objects.filter(pk=restaurant_id, status=Restaurant.STATUS_APPROVED).exists():
        raise NotFoundError("Restaurant not found.")
    if has_user_reviewed(restaurant_id, actor.id) is not None:
        raise ValidationError("You have already reviewed this restaurant. Edit your review instead.")

    urls = store_uploads(files, "reviews", actor)
    review = Review(
        restaurant_id=restaurant_id,
        user_id=actor.id,
        rating=rating,
        comment=(comment or "").strip(),
        images=urls,
    )
    _save_with_uploads(review, urls, "create")
    logger.info(f"User {actor.id} reviewed restaurant {restaurant_id} ({rating} stars)")
    return review


@operation("Your review has been updated.")
def update_review(actor, review_id, rating=None, comment=None, files=(), removed_images=()):
    require_authenticated(actor)
    if rating is not None:
        rating = validate_rating(rating)
    files = list(files)
    validate_uploads(files)

    try:
        review = Review.objects.get(pk=review_id)
    except Review.DoesNotExist:
        raise NotFoundError("Review not found.")
    if not (actor.owns(review.user_id) or actor.is_admin):
        raise AuthorizationError("You can only edit your own reviews.")

    removed = set(removed_images)
    retained = [url for url in review.images if url not in removed]
    urls = store_uploads(files, "reviews", actor)

    review.images = retained + urls
    if rating is not None:
        review.rating = rating
    if comment is not None:
        review.comment = comment.strip()
    _save_with_uploads(review, urls, "update")
    logger.info(f"User {actor.id} updated review {review.pk}")
    return review


@operation("Review deleted.")
def delete_review(actor, review_id):
    """Deleting a review that no longer exists succeeds quietly."""
    require_authenticated(actor)
    review = Review.objects.filter(pk=review_id).first()
    if review is None:
        logger.debug(f"Review {review_id} already gone")
        return None
    if not (actor.owns(review.user_id) or actor.is_admin):
        raise AuthorizationError("You can only delete your own reviews.")

    try:
        review.delete()
    except DatabaseError as exc:
        logger.warning(f"Deleting review {review_id} failed: {exc}")
        raise RemoteWriteError("Could not delete the review. Please try again.") from exc
    logger.info(f"User {actor.id} deleted review {review_id}")
    return None
