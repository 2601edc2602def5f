from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Protocol, Tuple

from moderation.exceptions import RemoteWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FavoritesSnapshot:
    user_id: int
    restaurant_ids: FrozenSet[int] = field(default_factory=frozenset)

    def including(self, restaurant_id: int) -> "FavoritesSnapshot":
        return FavoritesSnapshot(self.user_id, self.restaurant_ids | {restaurant_id})

    def excluding(self, restaurant_id: int) -> "FavoritesSnapshot":
        return FavoritesSnapshot(self.user_id, self.restaurant_ids - {restaurant_id})


class FavoritesGateway(Protocol):
    def fetch(self, user_id: int) -> Iterable[int]: ...

    def add(self, user_id: int, restaurant_id: int) -> None: ...

    def remove(self, user_id: int, restaurant_id: int) -> None: ...


class ToggleFailed(RemoteWriteError):
    """A toggle that did not reach storage. ``snapshot`` is the stored truth."""

    default_message = "Could not update your favorites. Please try again."

    def __init__(self, snapshot: FavoritesSnapshot, restaurant_id: int, message: Optional[str] = None):
        self.snapshot = snapshot
        super().__init__(
            message,
            restaurant_id=restaurant_id,
            is_favorited=is_favorited(snapshot, restaurant_id),
        )


def is_favorited(snapshot: FavoritesSnapshot, restaurant_id: int) -> bool:
    return restaurant_id in snapshot.restaurant_ids


def toggle(
    snapshot: FavoritesSnapshot, restaurant_id: int, gateway: FavoritesGateway
) -> Tuple[FavoritesSnapshot, bool]:
    new_state = not is_favorited(snapshot, restaurant_id)
    optimistic = snapshot.including(restaurant_id) if new_state else snapshot.excluding(restaurant_id)

    try:
        if new_state:
            gateway.add(snapshot.user_id, restaurant_id)
        else:
            gateway.remove(snapshot.user_id, restaurant_id)
    except RemoteWriteError as exc:
        logger.warning(f"Favorite toggle for user {snapshot.user_id} on restaurant {restaurant_id} failed: {exc}")
        raise ToggleFailed(reconcile(snapshot, gateway), restaurant_id) from exc

    return optimistic, new_state


def reconcile(snapshot: FavoritesSnapshot, gateway: FavoritesGateway) -> FavoritesSnapshot:
    """Stored favorites, or the pre-toggle set when even the re-read fails."""
    try:
        return FavoritesSnapshot(snapshot.user_id, frozenset(gateway.fetch(snapshot.user_id)))
    except RemoteWriteError as exc:
        logger.warning(f"Could not re-read favorites for user {snapshot.user_id}: {exc}")
        return snapshot
