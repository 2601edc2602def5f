from unittest import mock

import pytest
from django.urls import reverse

from moderation.identity import ANONYMOUS
from pets.models import Pet
from pets.services import create_pet, delete_pet, get_pet, update_pet, user_pets
from uploads.models import PendingUpload

pytestmark = pytest.mark.django_db


@pytest.fixture
def pet(user):
    return Pet.objects.create(user=user, name="Mochi", type="dog", size="small", breed="Shiba")


class TestCreatePet:
    def test_type_is_normalized(self, user_caller):
        result = create_pet(user_caller, {"name": " Tofu ", "type": "Cat", "size": "medium", "breed": ""})

        assert result.success
        pet = Pet.objects.get()
        assert (pet.name, pet.type, pet.size, pet.breed) == ("Tofu", "cat", "medium", None)
        assert pet.user_id == user_caller.id

    @pytest.mark.parametrize(
        "data",
        [
            {"name": "", "type": "dog", "size": "small"},
            {"name": "Rex", "type": "dragon", "size": "small"},
            {"name": "Rex", "type": "dog", "size": "huge"},
            {"name": "Rex", "type": "dog"},
        ],
    )
    def test_invalid_input(self, user_caller, data):
        assert create_pet(user_caller, data).error_code == "validation_error"
        assert not Pet.objects.exists()

    def test_photo_is_uploaded_and_committed(self, user_caller, image_file):
        result = create_pet(user_caller, {"name": "Kiwi", "type": "bird", "size": "small"}, photo=image_file("kiwi.png"))

        assert result.data.image_url.startswith("/media/pets/")
        assert not PendingUpload.objects.exists()

    def test_anonymous_is_refused(self):
        assert create_pet(ANONYMOUS, {"name": "Rex", "type": "dog", "size": "large"}).error_code == "authorization_error"


class TestOwnership:
    def test_other_users_pet_is_not_found(self, other_caller, pet):
        assert update_pet(other_caller, pet.pk, {"name": "Stolen"}).error_code == "not_found"
        assert delete_pet(other_caller, pet.pk).error_code == "not_found"
        pet.refresh_from_db()
        assert pet.name == "Mochi"

    def test_owner_updates_only_sent_fields(self, user_caller, pet):
        result = update_pet(user_caller, pet.pk, {"size": "medium"})

        assert result.success
        pet.refresh_from_db()
        assert (pet.name, pet.size, pet.breed) == ("Mochi", "medium", "Shiba")

    def test_owner_deletes(self, user_caller, pet):
        assert delete_pet(user_caller, pet.pk).success
        assert not Pet.objects.exists()

    def test_listing_is_scoped_to_the_owner(self, user_caller, other_user, pet):
        Pet.objects.create(user=other_user, name="Luna", type="cat", size="small")

        assert list(user_pets(user_caller)) == [pet]
        assert get_pet(user_caller, pet.pk) == pet

    def test_failed_photo_upload_leaves_the_pet_alone(self, user_caller, pet, image_file):
        with mock.patch("uploads.services.default_storage") as storage:
            storage.save.side_effect = OSError("disk full")
            result = update_pet(user_caller, pet.pk, {"name": "Mochi II"}, photo=image_file())

        assert result.error_code == "remote_write_error"
        pet.refresh_from_db()
        assert (pet.name, pet.image_url) == ("Mochi", None)


class TestPetsApi:
    def test_create_and_list(self, user_client):
        created = user_client.post(reverse("pet-list"), {"name": "Bao", "type": "rabbit", "size": "small"}, format="json")

        assert created.status_code == 201
        assert created.data["data"]["type"] == "rabbit"
        assert [item["name"] for item in user_client.get(reverse("pet-list")).data] == ["Bao"]

    def test_patch(self, user_client, pet):
        response = user_client.patch(reverse("pet-detail", args=[pet.pk]), {"breed": "Akita"}, format="json")

        assert response.data["data"]["breed"] == "Akita"

    def test_login_required(self, api_client):
        assert api_client.get(reverse("pet-list")).status_code == 401
