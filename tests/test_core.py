from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from soular.config.roles_config import ROLE_PERMISSIONS, role_has_permission, is_moderator_role
from soular.core.dependencies import is_ban_active
from soular.core.utils import slugify, clean_search, ilike_any, is_uuid, normalize_tags, row_or_none, rows
from soular.modules.collections.service import flatten_collection_films
from soular.modules.settings.schemas import SettingsUpdate
from soular.modules.settings.service import validate_settings
from soular.modules.subscription.service import add_months, period_end
from soular.modules.uploads.bucket_storage import BucketStorage
from soular.modules.uploads.service import file_extension
from tests.fakes import FakeSupabase, USER_ID


class TestUtils:
    def test_slugify(self):
        assert slugify("Hello, World!") == "hello-world"
        assert slugify("  --Film   Night 2024--  ") == "film-night-2024"
        assert slugify("!!!") == ""

    def test_is_uuid(self):
        assert is_uuid(USER_ID)
        assert not is_uuid("not-a-uuid")
        assert not is_uuid("")

    def test_clean_search_drops_filter_characters(self):
        assert clean_search("  drama, (classic)  ") == "drama   classic"
        assert clean_search(None) == ""

    def test_ilike_any(self):
        assert ilike_any(["title", "description"], "noir") == "title.ilike.%noir%,description.ilike.%noir%"

    def test_normalize_tags(self):
        assert normalize_tags([" Drama ", "", 3, "INDIE"]) == ["drama", "indie"]
        assert normalize_tags(["a", "b", "c", "d", "e", "f"]) == ["a", "b", "c", "d", "e"]
        assert normalize_tags(None) == []

    def test_row_helpers(self):
        class Result:
            data = [{"id": 1}, {"id": 2}]
        assert row_or_none(Result()) == {"id": 1}
        assert rows(Result()) == [{"id": 1}, {"id": 2}]
        Result.data = []
        assert row_or_none(Result()) is None
        assert row_or_none(None) is None


class TestRoles:
    def test_member_permissions(self):
        assert role_has_permission("user", "comments:create")
        assert not role_has_permission("user", "events:create")
        assert role_has_permission(None, "forum:create")

    def test_curator_hosts_events_but_cannot_manage_others(self):
        assert role_has_permission("curator", "events:create")
        assert role_has_permission("curator", "uploads:media")
        assert not role_has_permission("curator", "events:manage")

    def test_moderator_and_admin(self):
        assert role_has_permission("moderator", "forum:moderate")
        assert not role_has_permission("moderator", "users:assign_role")
        assert ROLE_PERMISSIONS["admin"] >= ROLE_PERMISSIONS["moderator"]
        assert role_has_permission("admin", "collections:manage")
        assert is_moderator_role("admin") and not is_moderator_role("curator")

    def test_unknown_role_has_nothing(self):
        assert not role_has_permission("ghost", "films:read")


class TestBanState:
    def test_permanent_ban(self):
        assert is_ban_active({"is_banned": True, "ban_expires_at": None})

    def test_expired_ban_is_inactive(self):
        past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
        assert not is_ban_active({"is_banned": True, "ban_expires_at": past})

    def test_future_ban_is_active(self):
        future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat().replace("+00:00", "Z")
        assert is_ban_active({"is_banned": True, "ban_expires_at": future})

    def test_not_banned(self):
        assert not is_ban_active({"is_banned": False})
        assert not is_ban_active(None)


class TestBillingPeriods:
    def test_month_end_is_clamped(self):
        start = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)

    def test_year_rollover(self):
        assert add_months(datetime(2024, 11, 15), 3) == datetime(2025, 2, 15)

    def test_period_end(self):
        start = datetime(2024, 2, 29)
        assert period_end(start, "monthly") == datetime(2024, 3, 29)
        assert period_end(start, "yearly") == datetime(2025, 2, 28)


class TestSettingsValidation:
    def test_nulls_are_dropped(self):
        assert validate_settings(SettingsUpdate(theme=None, show_email=False)) == {"show_email": False}

    @pytest.mark.parametrize("payload,detail", [
        ({"theme": "neon"}, "Invalid theme value"),
        ({"language": "fr"}, "Invalid language value"),
        ({"email_digest": "hourly"}, "Invalid email digest value"),
        ({"posts_per_page": 5}, "Posts per page must be between 10 and 100"),
        ({"digest_day": 7}, "Digest day must be between 0 (Sunday) and 6 (Saturday)"),
        ({"digest_day": None}, "Digest day must be between 0 (Sunday) and 6 (Saturday)"),
    ])
    def test_invalid_values(self, payload, detail):
        with pytest.raises(HTTPException) as exc:
            validate_settings(SettingsUpdate(**payload))
        assert exc.value.status_code == 400
        assert exc.value.detail == detail


class TestStorageHelpers:
    def test_file_extension(self):
        assert file_extension("Poster.PNG") == "png"
        assert file_extension("archive.tar.gz") == "gz"
        assert file_extension(None) == "bin"
        assert file_extension("", "jpg") == "jpg"

    def test_path_from_url(self):
        storage = BucketStorage(FakeSupabase(), "avatars")
        url = "https://project.supabase.co/storage/v1/object/public/avatars/u1/123.png"
        assert storage.path_from_url(url) == "u1/123.png"
        assert storage.path_from_url("u1/123.png") == "u1/123.png"

    def test_public_url_trailing_query_stripped(self):
        storage = BucketStorage(FakeSupabase(), "posters")
        assert storage.get_public_url("a.png") == "https://project.supabase.co/storage/v1/object/public/posters/a.png"


def test_flatten_collection_films():
    entries = [
        {"display_order": 2, "film": {"id": "f2", "title": "B"}},
        {"display_order": 1, "film": [{"id": "f1", "title": "A"}]},
        {"display_order": 3, "film": None},
    ]
    assert flatten_collection_films(entries) == [
        {"id": "f2", "title": "B", "display_order": 2},
        {"id": "f1", "title": "A", "display_order": 1},
    ]
