from unittest import mock

import pytest
from django.db import DatabaseError, IntegrityError
from django.urls import reverse

from favorites.models import Favorite
from favorites.services import DatabaseFavoritesGateway, favorite_count, load_snapshot, toggle_favorite
from favorites.snapshot import toggle
from moderation.identity import ANONYMOUS

pytestmark = pytest.mark.django_db


class TestGateway:
    def test_concurrent_adds_leave_one_row(self, user, restaurant):
        gateway = DatabaseFavoritesGateway()

        gateway.add(user.pk, restaurant.pk)
        gateway.add(user.pk, restaurant.pk)

        assert Favorite.objects.filter(user=user, restaurant=restaurant).count() == 1

    def test_two_devices_toggling_on_agree(self, user_caller, restaurant):
        gateway = DatabaseFavoritesGateway()
        phone = load_snapshot(user_caller, gateway)
        laptop = load_snapshot(user_caller, gateway)

        phone, phone_state = toggle(phone, restaurant.pk, gateway)
        laptop, laptop_state = toggle(laptop, restaurant.pk, gateway)

        assert phone_state is laptop_state is True
        assert Favorite.objects.count() == 1

    def test_removing_an_absent_row_is_fine(self, user, restaurant):
        DatabaseFavoritesGateway().remove(user.pk, restaurant.pk)

    def test_database_failure_is_remote_write_error(self, user_caller, restaurant):
        with mock.patch.object(Favorite.objects, "create", side_effect=DatabaseError("down")):
            result = toggle_favorite(user_caller, restaurant.pk)

        assert result.error_code == "remote_write_error"
        assert result.error.snapshot.restaurant_ids == frozenset()
        assert result.error.details["is_favorited"] is False

    def test_integrity_error_without_a_stored_row_is_a_failure(self, user_caller, restaurant):
        # the restaurant was deleted between the existence check and the insert
        with mock.patch.object(Favorite.objects, "create", side_effect=IntegrityError("FOREIGN KEY constraint failed")):
            result = toggle_favorite(user_caller, restaurant.pk)

        assert result.error_code == "remote_write_error"
        assert result.error.details["is_favorited"] is False
        assert not Favorite.objects.exists()


class TestToggleFavorite:
    def test_toggle_round_trip(self, user_caller, restaurant):
        added = toggle_favorite(user_caller, restaurant.pk)
        assert added.data == {"restaurant_id": restaurant.pk, "is_favorited": True, "favorite_ids": [restaurant.pk]}

        removed = toggle_favorite(user_caller, str(restaurant.pk))
        assert removed.data["is_favorited"] is False
        assert not Favorite.objects.exists()

    def test_requires_login(self, restaurant):
        assert toggle_favorite(ANONYMOUS, restaurant.pk).error_code == "authorization_error"

    def test_unknown_restaurant(self, user_caller):
        assert toggle_favorite(user_caller, 4040).error_code == "not_found"

    def test_count(self, user, other_user, restaurant):
        Favorite.objects.create(user=user, restaurant=restaurant)
        Favorite.objects.create(user=other_user, restaurant=restaurant)
        assert favorite_count(restaurant.pk) == 2


class TestFavoritesApi:
    def test_toggle_and_list(self, user_client, restaurant):
        toggled = user_client.post(reverse("favorite-toggle"), {"restaurant_id": restaurant.pk}, format="json")
        assert toggled.status_code == 200
        assert toggled.data["data"]["is_favorited"] is True

        listed = user_client.get(reverse("favorite-list"), {"lang": "zh"})
        assert [item["restaurant"]["localized"]["name"] for item in listed.data["results"]] == ["爪子麵館"]

    def test_login_required(self, api_client):
        assert api_client.get(reverse("favorite-list")).status_code == 401
