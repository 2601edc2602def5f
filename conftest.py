import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from moderation.identity import Caller
from restaurants.models import Restaurant


@pytest.fixture(autouse=True)
def in_memory_storage(settings):
    settings.STORAGES = {
        **settings.STORAGES,
        "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    }


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        email="ana@example.com", password="pass-Word-123", first_name="Ana", last_name="Lei"
    )


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(
        email="bruno@example.com", password="pass-Word-123", first_name="Bruno", last_name="Chan"
    )


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_user(
        email="mod@example.com", password="pass-Word-123", first_name="Mo", last_name="Derator", role="admin"
    )


@pytest.fixture
def user_caller(user):
    return Caller.from_user(user)


@pytest.fixture
def other_caller(other_user):
    return Caller.from_user(other_user)


@pytest.fixture
def admin_caller(admin_user):
    return Caller.from_user(admin_user)


@pytest.fixture
def restaurant(user):
    return Restaurant.objects.create(
        name="Paws & Noodles",
        name_zh="爪子麵館",
        address="12 Rua da Felicidade",
        cuisine_type=["Japanese"],
        cuisine_type_zh=["日本菜"],
        cuisine_type_pt=["Japonesa"],
        pet_policy="dogs_allowed",
        gallery_images=["https://cdn.example.com/c.jpg"],
        status=Restaurant.STATUS_APPROVED,
        submitted_by=user,
    )


@pytest.fixture
def pending_restaurant(user):
    return Restaurant.objects.create(
        name="Cat Cafe",
        address="3 Travessa do Gato",
        submitted_by=user,
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def image_file():
    def make(name="photo.jpg", size=128, content_type="image/jpeg"):
        return SimpleUploadedFile(name, b"x" * size, content_type=content_type)

    return make
