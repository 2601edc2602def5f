import logging

from django.db import DatabaseError, IntegrityError, transaction

from moderation.exceptions import NotFoundError, RemoteWriteError, ValidationError
from moderation.identity import require_authenticated
from moderation.results import operation
from restaurants.models import Restaurant

from .models import Favorite
from .snapshot import FavoritesSnapshot, toggle

logger = logging.getLogger(__name__)


class DatabaseFavoritesGateway:
    def fetch(self, user_id):
        try:
            return frozenset(Favorite.objects.filter(user_id=user_id).values_list("restaurant_id", flat=True))
        except DatabaseError as exc:
            raise RemoteWriteError("Could not load your favorites.") from exc

    def add(self, user_id, restaurant_id):
        try:
            with transaction.atomic():
                Favorite.objects.create(user_id=user_id, restaurant_id=restaurant_id)
        except IntegrityError as exc:
            # only the unique pair counts as success; a vanished restaurant does not
            if not Favorite.objects.filter(user_id=user_id, restaurant_id=restaurant_id).exists():
                raise RemoteWriteError("Could not save your favorite.", restaurant_id=restaurant_id) from exc
            logger.debug(f"Restaurant {restaurant_id} was already a favorite of user {user_id}")
        except DatabaseError as exc:
            raise RemoteWriteError("Could not save your favorite.") from exc

    def remove(self, user_id, restaurant_id):
        try:
            deleted, _ = Favorite.objects.filter(user_id=user_id, restaurant_id=restaurant_id).delete()
        except DatabaseError as exc:
            raise RemoteWriteError("Could not remove your favorite.") from exc
        if not deleted:
            logger.debug(f"Restaurant {restaurant_id} was not a favorite of user {user_id}")


def load_snapshot(actor, gateway=None):
    gateway = gateway or DatabaseFavoritesGateway()
    return FavoritesSnapshot(actor.id, frozenset(gateway.fetch(actor.id)))


@operation("Favorites updated.")
def toggle_favorite(actor, restaurant_id, gateway=None):
    require_authenticated(actor)
    try:
        restaurant_id = int(restaurant_id)
    except (TypeError, ValueError):
        raise ValidationError("A restaurant id is required.")
    if not Restaurant.objects.filter(pk=restaurant_id).exists():
        raise NotFoundError("Restaurant not found.")

    gateway = gateway or DatabaseFavoritesGateway()
    snapshot, favorited = toggle(load_snapshot(actor, gateway), restaurant_id, gateway)
    logger.info(f"User {actor.id} {'added' if favorited else 'removed'} favorite restaurant {restaurant_id}")
    return {
        "restaurant_id": restaurant_id,
        "is_favorited": favorited,
        "favorite_ids": sorted(snapshot.restaurant_ids),
    }


def favorite_count(restaurant_id):
    return Favorite.objects.filter(restaurant_id=restaurant_id).count()


def user_favorites(actor):
    return Favorite.objects.filter(user_id=actor.id).select_related("restaurant").order_by("-created_at")
