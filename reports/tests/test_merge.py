from unittest import mock

import pytest
from django.db import DatabaseError

from moderation.exceptions import NotFoundError, RemoteWriteError, ValidationError
from reports import merge
from reports.models import CorrectionReport

pytestmark = pytest.mark.django_db


@pytest.fixture
def listing(restaurant):
    restaurant.gallery_images = ["c.jpg"]
    restaurant.menu_images = ["menu-1.jpg"]
    restaurant.save()
    return restaurant


def report_for(restaurant, field_name, value):
    return CorrectionReport.objects.create(restaurant=restaurant, field_name=field_name, suggested_value=value)


class TestComputeChanges:
    def test_split_drops_blanks_and_trims(self):
        assert merge.split_values(" a.jpg, ,b.jpg,") == ["a.jpg", "b.jpg"]
        assert merge.split_values("single") == ["single"]
        assert merge.split_values("") == []

    def test_scalar_overwrites(self):
        assert merge.compute_changes("contact_info", "+853 2888 0000", {}) == {"contact_info": "+853 2888 0000"}

    def test_other_goes_to_other_info(self):
        assert merge.compute_changes("other", "Water bowls at the door", {}) == {
            "other_info": "Water bowls at the door"
        }

    def test_gallery_append_rederives_cover(self):
        assert merge.compute_changes("image", "a.jpg,b.jpg", {"gallery_images": []}) == {
            "gallery_images": ["a.jpg", "b.jpg"],
            "image_url": "a.jpg",
        }

    def test_menu_append_keeps_duplicates(self):
        assert merge.compute_changes("menu", "m.jpg", {"menu_images": ["m.jpg"]}) == {
            "menu_images": ["m.jpg", "m.jpg"]
        }

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            merge.compute_changes("name", "New name", {})


class TestApply:
    def test_image_correction_appends_in_order(self, listing):
        updated = merge.apply(report_for(listing, "image", "a.jpg,b.jpg"))

        assert updated.gallery_images == ["c.jpg", "a.jpg", "b.jpg"]
        assert updated.image_url == "c.jpg"
        assert updated.version == listing.version + 1

    def test_image_correction_on_empty_gallery_sets_cover(self, listing):
        listing.gallery_images = []
        listing.save()

        updated = merge.apply(report_for(listing, "image", "a.jpg"))

        assert updated.image_url == "a.jpg"

    def test_cuisine_correction_replaces_list_and_leaves_mirrors(self, listing):
        updated = merge.apply(report_for(listing, "cuisine_type", "Japanese,Thai"))

        assert updated.cuisine_type == ["Japanese", "Thai"]
        assert updated.cuisine_type_zh == ["日本菜"]
        assert updated.cuisine_type_pt == ["Japonesa"]

    def test_scalar_correction_leaves_mirrors(self, listing):
        listing.address_zh = "福隆新街12號"
        listing.save()

        updated = merge.apply(report_for(listing, "address", "14 Rua da Felicidade"))

        assert updated.address == "14 Rua da Felicidade"
        assert updated.address_zh == "福隆新街12號"

    def test_database_failure_is_a_remote_write_error(self, listing):
        report = report_for(listing, "pet_policy", "cats_allowed")
        with mock.patch("django.db.models.query.QuerySet.update", side_effect=DatabaseError("down")):
            with pytest.raises(RemoteWriteError):
                merge.apply(report)

    def test_deleted_restaurant(self, listing):
        report = report_for(listing, "pet_policy", "cats_allowed")
        plan = merge.prepare(report)
        listing.delete()

        with pytest.raises(NotFoundError):
            merge.commit(plan, conditional=False)


class TestConcurrentAppends:
    def test_unguarded_writes_lose_an_append(self, listing):
        first = report_for(listing, "image", "a.jpg")
        second = report_for(listing, "image", "b.jpg")

        plan_a = merge.prepare(first)
        plan_b = merge.prepare(second)
        merge.commit(plan_a, conditional=False)
        merge.commit(plan_b, conditional=False)

        listing.refresh_from_db()
        assert listing.gallery_images == ["c.jpg", "b.jpg"]

    def test_conditional_write_detects_the_stale_read(self, listing):
        first = report_for(listing, "image", "a.jpg")
        second = report_for(listing, "image", "b.jpg")

        plan_a = merge.prepare(first)
        plan_b = merge.prepare(second)
        assert merge.commit(plan_a) is True
        assert merge.commit(plan_b) is False

        updated = merge.apply(second)
        assert updated.gallery_images == ["c.jpg", "a.jpg", "b.jpg"]

    def test_apply_retries_after_a_concurrent_write(self, listing):
        first = report_for(listing, "image", "a.jpg")
        second = report_for(listing, "image", "b.jpg")
        real_prepare = merge.prepare
        calls = []

        def prepare_then_race(report):
            plan = real_prepare(report)
            calls.append(report.pk)
            if len(calls) == 1:
                # another moderator lands their merge between our read and write
                merge.apply(first)
            return plan

        with mock.patch("reports.merge.prepare", side_effect=prepare_then_race):
            updated = merge.apply(second)

        assert calls == [second.pk, first.pk, second.pk]
        assert updated.gallery_images == ["c.jpg", "a.jpg", "b.jpg"]

    def test_apply_gives_up_after_max_retries(self, listing, settings):
        settings.PETEATS = {**settings.PETEATS, "MERGE_MAX_RETRIES": 3}
        report = report_for(listing, "image", "a.jpg")

        with mock.patch("reports.merge.commit", return_value=False) as commit:
            with pytest.raises(RemoteWriteError):
                merge.apply(report)

        assert commit.call_count == 3

    def test_conditional_writes_can_be_switched_off(self, listing, settings):
        settings.PETEATS = {**settings.PETEATS, "MERGE_CONDITIONAL_WRITES": False}
        report = report_for(listing, "image", "a.jpg")

        with mock.patch("reports.merge.commit", wraps=merge.commit) as commit:
            merge.apply(report)

        commit.assert_called_once()
        assert commit.call_args.kwargs == {"conditional": False}
