import pytest
from django.urls import reverse

from favorites.models import Favorite
from restaurants.models import CuisineType, Restaurant
from reviews.models import Review

pytestmark = pytest.mark.django_db


def test_list_shows_only_approved_restaurants(api_client, restaurant, pending_restaurant):
    response = api_client.get(reverse("restaurant-list"))

    assert response.status_code == 200
    assert [item["id"] for item in response.data["results"]] == [restaurant.pk]


def test_admin_can_filter_by_status(admin_client, restaurant, pending_restaurant):
    response = admin_client.get(reverse("restaurant-list"), {"status": "pending"})

    assert [item["id"] for item in response.data["results"]] == [pending_restaurant.pk]


def test_pending_detail_is_hidden_from_visitors(api_client, pending_restaurant):
    response = api_client.get(reverse("restaurant-detail", args=[pending_restaurant.pk]))
    assert response.status_code == 404


def test_lang_parameter_adds_localized_block(api_client, restaurant):
    response = api_client.get(reverse("restaurant-detail", args=[restaurant.pk]), {"lang": "zh"})

    assert response.data["localized"]["name"] == "爪子麵館"
    assert response.data["localized"]["address"] == "12 Rua da Felicidade"
    assert response.data["localized"]["cuisine_type"] == ["日本菜"]


def test_cuisine_filter(api_client, restaurant):
    Restaurant.objects.create(name="Thai Tails", address="1 Rua", cuisine_type=["Thai"], status="approved")

    response = api_client.get(reverse("restaurant-list"), {"cuisine": "japanese"})

    assert [item["name"] for item in response.data["results"]] == ["Paws & Noodles"]


def test_rating_ignores_hidden_reviews(api_client, restaurant, user, other_user):
    Review.objects.create(restaurant=restaurant, user=user, rating=4)
    Review.objects.create(restaurant=restaurant, user=other_user, rating=1, is_hidden=True)

    response = api_client.get(reverse("restaurant-rating", args=[restaurant.pk]))

    assert response.data == {"restaurant_id": restaurant.pk, "review_count": 1, "average_rating": 4.0}
    listed = api_client.get(reverse("restaurant-detail", args=[restaurant.pk]))
    assert listed.data["review_count"] == 1
    assert listed.data["average_rating"] == 4.0


def test_favorite_count(api_client, restaurant, user, other_user):
    Favorite.objects.create(user=user, restaurant=restaurant)
    Favorite.objects.create(user=other_user, restaurant=restaurant)

    response = api_client.get(reverse("restaurant-favorite-count", args=[restaurant.pk]))

    assert response.data["favorite_count"] == 2


def test_submit_requires_login(api_client):
    response = api_client.post(reverse("restaurant-list"), {"name": "x", "address": "y"}, format="json")
    assert response.status_code == 401


def test_submit_creates_pending_listing(user_client, image_file):
    response = user_client.post(
        reverse("restaurant-list"),
        {
            "name": "Dog Dumplings",
            "address": "8 Avenida Almeida Ribeiro",
            "cuisine_type": ["Chinese"],
            "cover_image": image_file("cover.jpg"),
        },
        format="multipart",
    )

    assert response.status_code == 201
    assert response.data["success"] is True
    assert response.data["data"]["status"] == "pending"
    assert response.data["data"]["image_url"] == response.data["data"]["gallery_images"][0]


def test_submit_validates_opening_hours(user_client):
    response = user_client.post(
        reverse("restaurant-list"),
        {
            "name": "Dog Dumplings",
            "address": "8 Avenida Almeida Ribeiro",
            "opening_hours": {"funday": {"open": "09:00", "close": "18:00"}},
        },
        format="json",
    )

    assert response.status_code == 400
    assert response.data["success"] is False
    assert "opening_hours" in response.data["errors"]


def test_admin_edit_and_approve(admin_client, pending_restaurant):
    edit = admin_client.patch(
        reverse("restaurant-detail", args=[pending_restaurant.pk]),
        {"description": "Cats everywhere", "opening_hours": {"monday": {"open": "10:00", "close": "20:00"}}},
        format="json",
    )
    assert edit.status_code == 200
    assert edit.data["data"]["description"] == "Cats everywhere"

    approve = admin_client.post(
        reverse("restaurant-approve", args=[pending_restaurant.pk]), {"admin_comment": "Looks good"}, format="json"
    )
    assert approve.status_code == 200
    assert approve.data["data"]["status"] == "approved"
    assert approve.data["data"]["admin_comment"] == "Looks good"


def test_user_cannot_approve(user_client, pending_restaurant):
    response = user_client.post(reverse("restaurant-approve", args=[pending_restaurant.pk]), format="json")

    assert response.status_code == 403
    assert response.data["error_code"] == "authorization_error"


def test_catalog_is_public_read_admin_write(api_client, admin_client):
    CuisineType.objects.create(name="Thai", name_pt="Tailandesa")

    listed = api_client.get(reverse("cuisine-type-list"), {"lang": "pt"})
    assert listed.data[0]["label"] == "Tailandesa"

    denied = api_client.post(reverse("cuisine-type-list"), {"name": "Korean"}, format="json")
    assert denied.status_code == 401

    created = admin_client.post(reverse("cuisine-type-list"), {"name": "Korean", "name_zh": "韓國菜"}, format="json")
    assert created.status_code == 201
