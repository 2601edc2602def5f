from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from moderation.identity import ANONYMOUS
from reviews.models import Review
from reviews.selectors import has_user_reviewed, list_reviews, restaurant_rating, user_reviews
from reviews.services import delete_review, submit_review, update_review, validate_rating
from uploads.models import PendingUpload

pytestmark = pytest.mark.django_db


class TestSubmitReview:
    @pytest.mark.parametrize("rating", [0, 6, -1, 4.5, "five", None, True])
    def test_bad_rating_fails_before_any_io(self, user_caller, restaurant, image_file, rating, django_assert_num_queries):
        files = [image_file()]
        with mock.patch("reviews.services.store_uploads") as store, django_assert_num_queries(0):
            result = submit_review(user_caller, restaurant.pk, rating, "meh", files=files)

        assert result.error_code == "validation_error"
        store.assert_not_called()

    def test_valid_ratings(self):
        assert [validate_rating(value) for value in (1, "3", 5.0)] == [1, 3, 5]

    def test_photos_are_stored_and_first_becomes_image_url(self, user_caller, restaurant, image_file):
        result = submit_review(
            user_caller, restaurant.pk, 5, "Water bowl for my corgi!", files=[image_file("a.jpg"), image_file("b.jpg")]
        )

        assert result.success
        review = Review.objects.get(pk=result.data.pk)
        assert len(review.images) == 2
        assert review.image_url == review.images[0]
        assert review.user_id == user_caller.id
        assert not PendingUpload.objects.exists()

    def test_one_review_per_restaurant(self, user_caller, restaurant):
        submit_review(user_caller, restaurant.pk, 4, "Good")
        result = submit_review(user_caller, restaurant.pk, 5, "Even better")

        assert result.error_code == "validation_error"
        assert Review.objects.count() == 1

    def test_upload_failure_writes_nothing(self, user_caller, restaurant, image_file):
        with mock.patch("uploads.services.default_storage") as storage:
            storage.save.side_effect = ["reviews/a.jpg", OSError("disk full")]
            storage.url.side_effect = lambda name: f"/media/{name}"
            result = submit_review(user_caller, restaurant.pk, 4, "Nice", files=[image_file("a.jpg"), image_file("b.jpg")])

        assert result.error_code == "remote_write_error"
        assert not Review.objects.exists()
        assert list(PendingUpload.objects.values_list("path", flat=True)) == ["reviews/a.jpg"]

    def test_anonymous_cannot_review(self, restaurant):
        assert submit_review(ANONYMOUS, restaurant.pk, 4, "Nice").error_code == "authorization_error"

    def test_unpublished_restaurant(self, user_caller, pending_restaurant):
        assert submit_review(user_caller, pending_restaurant.pk, 4, "Nice").error_code == "not_found"


class TestUpdateReview:
    @pytest.fixture
    def review(self, restaurant, user):
        return Review.objects.create(restaurant=restaurant, user=user, rating=3, images=["one.jpg", "two.jpg"])

    def test_upload_failure_leaves_the_review_unchanged(self, user_caller, review, image_file):
        with mock.patch("uploads.services.default_storage") as storage:
            storage.save.side_effect = ["reviews/three.jpg", OSError("disk full")]
            storage.url.side_effect = lambda name: f"/media/{name}"
            result = update_review(
                user_caller,
                review.pk,
                rating=5,
                comment="Better now",
                files=[image_file("three.jpg"), image_file("four.jpg")],
                removed_images=["one.jpg"],
            )

        assert result.error_code == "remote_write_error"
        review.refresh_from_db()
        assert (review.rating, review.comment, review.images) == (3, "", ["one.jpg", "two.jpg"])
        assert review.image_url == "one.jpg"
        assert list(PendingUpload.objects.values_list("path", flat=True)) == ["reviews/three.jpg"]

    def test_removes_and_appends_images(self, user_caller, review, image_file):
        result = update_review(
            user_caller, review.pk, rating=4, comment="Better now", files=[image_file("three.jpg")],
            removed_images=["one.jpg"],
        )

        assert result.success
        review.refresh_from_db()
        assert review.rating == 4
        assert review.images[0] == "two.jpg"
        assert len(review.images) == 2
        assert review.image_url == "two.jpg"

    def test_other_users_cannot_edit(self, other_caller, review):
        result = update_review(other_caller, review.pk, rating=1)

        assert result.error_code == "authorization_error"
        review.refresh_from_db()
        assert review.rating == 3

    def test_admin_can_edit(self, admin_caller, review):
        assert update_review(admin_caller, review.pk, comment="Edited by staff").success

    def test_bad_rating(self, user_caller, review):
        assert update_review(user_caller, review.pk, rating=9).error_code == "validation_error"


class TestDeleteReview:
    def test_missing_review_is_a_quiet_success(self, user_caller):
        assert delete_review(user_caller, 999).success

    def test_cross_user_delete_is_refused(self, other_caller, restaurant, user):
        review = Review.objects.create(restaurant=restaurant, user=user, rating=5)

        result = delete_review(other_caller, review.pk)

        assert result.error_code == "authorization_error"
        assert Review.objects.filter(pk=review.pk, rating=5).exists()

    def test_owner_and_admin_can_delete(self, user_caller, admin_caller, restaurant, user, other_user):
        own = Review.objects.create(restaurant=restaurant, user=user, rating=5)
        theirs = Review.objects.create(restaurant=restaurant, user=other_user, rating=1)

        assert delete_review(user_caller, own.pk).success
        assert delete_review(admin_caller, theirs.pk).success
        assert not Review.objects.exists()

    def test_storage_failure(self, user_caller, restaurant, user):
        review = Review.objects.create(restaurant=restaurant, user=user, rating=5)

        with mock.patch.object(Review, "delete", side_effect=DatabaseError("locked")):
            result = delete_review(user_caller, review.pk)

        assert result.error_code == "remote_write_error"


class TestSelectors:
    def test_rating_counts_visible_reviews_only(self, restaurant, user, other_user, admin_user):
        Review.objects.create(restaurant=restaurant, user=user, rating=5)
        Review.objects.create(restaurant=restaurant, user=other_user, rating=4)
        Review.objects.create(restaurant=restaurant, user=admin_user, rating=1, is_hidden=True)

        rating = restaurant_rating(restaurant.pk)

        assert rating.review_count == 2
        assert rating.average_rating == 4.5

    def test_rating_without_reviews(self, restaurant):
        assert restaurant_rating(restaurant.pk).average_rating is None

    def test_admin_sees_hidden_reviews(self, admin_caller, restaurant, user):
        hidden = Review.objects.create(restaurant=restaurant, user=user, rating=1, is_hidden=True)
        assert list(list_reviews(admin_caller, restaurant.pk)) == [hidden]
        assert list(list_reviews(ANONYMOUS, restaurant.pk)) == []

    def test_newest_duplicate_wins(self, restaurant, user):
        older = Review.objects.create(restaurant=restaurant, user=user, rating=2)
        newer = Review.objects.create(restaurant=restaurant, user=user, rating=4)
        Review.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        assert has_user_reviewed(restaurant.pk, user.pk) == newer
        assert has_user_reviewed(restaurant.pk, None) is None

    def test_user_reviews_include_hidden(self, user_caller, restaurant, user):
        hidden = Review.objects.create(restaurant=restaurant, user=user, rating=1, is_hidden=True)
        assert list(user_reviews(user_caller)) == [hidden]
