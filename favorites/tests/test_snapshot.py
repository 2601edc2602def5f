import pytest

from favorites.snapshot import FavoritesSnapshot, ToggleFailed, is_favorited, toggle
from moderation.exceptions import RemoteWriteError


class FakeGateway:
    def __init__(self, stored=(), fail_writes=False, fail_fetch=False):
        self.stored = set(stored)
        self.fail_writes = fail_writes
        self.fail_fetch = fail_fetch
        self.calls = []

    def fetch(self, user_id):
        self.calls.append(("fetch", user_id))
        if self.fail_fetch:
            raise RemoteWriteError("read failed")
        return frozenset(self.stored)

    def add(self, user_id, restaurant_id):
        self.calls.append(("add", restaurant_id))
        if self.fail_writes:
            raise RemoteWriteError("write failed")
        self.stored.add(restaurant_id)

    def remove(self, user_id, restaurant_id):
        self.calls.append(("remove", restaurant_id))
        if self.fail_writes:
            raise RemoteWriteError("write failed")
        self.stored.discard(restaurant_id)


def test_toggle_on_then_off():
    gateway = FakeGateway()
    snapshot = FavoritesSnapshot(user_id=1)

    snapshot, state = toggle(snapshot, 7, gateway)
    assert state is True and is_favorited(snapshot, 7)

    snapshot, state = toggle(snapshot, 7, gateway)
    assert state is False and not is_favorited(snapshot, 7)
    assert gateway.calls == [("add", 7), ("remove", 7)]


def test_toggle_does_not_mutate_input():
    original = FavoritesSnapshot(user_id=1, restaurant_ids=frozenset({3}))
    toggle(original, 7, FakeGateway({3}))
    assert original.restaurant_ids == frozenset({3})


def test_stale_snapshot_removing_an_absent_row_succeeds():
    # another device already removed it
    snapshot = FavoritesSnapshot(user_id=1, restaurant_ids=frozenset({7}))
    new_snapshot, state = toggle(snapshot, 7, FakeGateway())
    assert state is False
    assert not is_favorited(new_snapshot, 7)


def test_failed_write_reconciles_from_storage():
    gateway = FakeGateway(stored={7, 9}, fail_writes=True)
    optimistic_base = FavoritesSnapshot(user_id=1, restaurant_ids=frozenset({9}))

    with pytest.raises(ToggleFailed) as excinfo:
        toggle(optimistic_base, 7, gateway)

    error = excinfo.value
    assert error.snapshot.restaurant_ids == frozenset({7, 9})
    assert error.details == {"restaurant_id": 7, "is_favorited": True}
    assert error.code == "remote_write_error"
    assert gateway.calls[-1] == ("fetch", 1)


def test_failed_reconcile_falls_back_to_previous_snapshot():
    gateway = FakeGateway(fail_writes=True, fail_fetch=True)
    snapshot = FavoritesSnapshot(user_id=1, restaurant_ids=frozenset({2}))

    with pytest.raises(ToggleFailed) as excinfo:
        toggle(snapshot, 7, gateway)

    assert excinfo.value.snapshot == snapshot
