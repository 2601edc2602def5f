from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.db.models import Avg, Count, Q

from .models import Review


@dataclass(frozen=True)
class RestaurantRating:
    restaurant_id: int
    review_count: int
    average_rating: Optional[float]


def visible_to(actor, queryset=None):
    if queryset is None:
        queryset = Review.objects.all()
    if actor.is_admin:
        return queryset
    if actor.is_authenticated:
        return queryset.filter(Q(is_hidden=False) | Q(user_id=actor.id))
    return queryset.filter(is_hidden=False)


def list_reviews(actor, restaurant_id):
    queryset = Review.objects.filter(restaurant_id=restaurant_id).select_related("user")
    return visible_to(actor, queryset).order_by("-created_at")


def has_user_reviewed(restaurant_id, user_id) -> Optional[Review]:
    """The user's review of the restaurant; the newest wins if there are several."""
    if user_id is None:
        return None
    return Review.objects.filter(restaurant_id=restaurant_id, user_id=user_id).order_by("-created_at").first()


def restaurant_rating(restaurant_id) -> RestaurantRating:
    aggregate = Review.objects.filter(restaurant_id=restaurant_id, is_hidden=False).aggregate(
        review_count=Count("id"),
        average_rating=Avg("rating"),
    )
    average = aggregate["average_rating"]
    return RestaurantRating(
        restaurant_id=int(restaurant_id),
        review_count=aggregate["review_count"],
        average_rating=round(float(average), 2) if average is not None else None,
    )


def user_reviews(actor):
    return Review.objects.filter(user_id=actor.id).select_related("restaurant").order_by("-created_at")
