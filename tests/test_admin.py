from tests.fakes import DISCUSSION_ID, OTHER_USER_ID, USER_ID


class TestAdminMe:
    def test_guest(self, client):
        assert client.get("/api/admin/me").json() == {
            "role": "guest", "is_admin": False, "is_moderator": False, "is_banned": False
        }

    def test_moderator(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        data = client.get("/api/admin/me").json()
        assert data["is_moderator"] is True
        assert data["is_admin"] is False

    def test_missing_profile_is_plain_user(self, client, login):
        login()
        assert client.get("/api/admin/me").json()["role"] == "user"


class TestUsers:
    def test_member_forbidden(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("curator")
        response = client.get("/api/admin/users")
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions. Required: moderation:read"

    def test_list_filters(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        fake_supabase.queue("profiles", [{"id": OTHER_USER_ID, "username": "budi", "role": "user"}], count=1)
        response = client.get("/api/admin/users?role=user&banned=true&search=bud")
        assert response.status_code == 200
        assert response.json()["total"] == 1
        query = fake_supabase.queries("profiles")[1]
        assert ("eq", ("role", "user"), {}) in query.calls
        assert ("eq", ("is_banned", True), {}) in query.calls


class TestBans:
    def test_ban_with_duration(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        fake_supabase.queue("profiles", [{"id": OTHER_USER_ID}])
        response = client.post(f"/api/admin/users/{OTHER_USER_ID}/ban", json={"reason": "spam", "duration_days": 7})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["ban_expires_at"] is not None
        log = fake_supabase.queries("rpc:log_moderation_action")[0].params
        assert log["p_action_type"] == "user_banned"
        assert log["p_reason"] == "spam"

    def test_permanent_ban(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        fake_supabase.queue("profiles", [{"id": OTHER_USER_ID}])
        response = client.post(f"/api/admin/users/{OTHER_USER_ID}/ban", json={"reason": "abuse"})
        assert response.json()["ban_expires_at"] is None

    def test_cannot_ban_self(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        response = client.post(f"/api/admin/users/{USER_ID}/ban", json={"reason": "test"})
        assert response.status_code == 400

    def test_blank_reason(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        response = client.post(f"/api/admin/users/{OTHER_USER_ID}/ban", json={"reason": "  "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Ban reason is required"

    def test_unknown_user(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        response = client.post(f"/api/admin/users/{OTHER_USER_ID}/ban", json={"reason": "spam"})
        assert response.status_code == 404

    def test_unban(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        fake_supabase.queue("profiles", [{"id": OTHER_USER_ID}])
        assert client.delete(f"/api/admin/users/{OTHER_USER_ID}/ban").status_code == 200
        update = fake_supabase.payloads("profiles", "update")[0]
        assert update["is_banned"] is False
        assert update["ban_expires_at"] is None

    def test_non_uuid_user(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        assert client.post("/api/admin/users/not-a-uuid/ban", json={"reason": "spam"}).status_code == 404
        fake_supabase.with_role("moderator")
        assert client.delete("/api/admin/users/not-a-uuid/ban").status_code == 404
        assert len(fake_supabase.queries("profiles")) == 2
        assert fake_supabase.queries("profiles", "update") == []


class TestRoles:
    def test_moderator_cannot_assign_roles(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        assert client.patch(f"/api/admin/users/{OTHER_USER_ID}/role", json={"role": "admin"}).status_code == 403

    def test_admin_assigns_role(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        fake_supabase.queue("profiles", [{"role": "user", "username": "budi"}])
        response = client.patch(f"/api/admin/users/{OTHER_USER_ID}/role", json={"role": "curator"})
        assert response.status_code == 200
        assert response.json()["data"] == {"user_id": OTHER_USER_ID, "old_role": "user", "new_role": "curator"}

    def test_invalid_role(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        response = client.patch(f"/api/admin/users/{OTHER_USER_ID}/role", json={"role": "superuser"})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid role")

    def test_cannot_change_own_role(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        assert client.patch(f"/api/admin/users/{USER_ID}/role", json={"role": "user"}).status_code == 400

    def test_non_uuid_user(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        assert client.patch("/api/admin/users/not-a-uuid/role", json={"role": "curator"}).status_code == 404
        assert len(fake_supabase.queries("profiles")) == 1


class TestDiscussionFlags:
    def test_lock_toggles(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        fake_supabase.queue("forum_discussions", [{"is_locked": False, "title": "t"}])
        fake_supabase.queue("forum_discussions", [{"id": DISCUSSION_ID, "is_locked": True}])
        data = client.post(f"/api/admin/discussions/{DISCUSSION_ID}/lock").json()
        assert data["is_locked"] is True
        assert fake_supabase.queries("rpc:log_moderation_action")[0].params["p_action_type"] == "lock"

    def test_unpin(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        fake_supabase.queue("forum_discussions", [{"is_pinned": True, "title": "t"}])
        data = client.post(f"/api/admin/discussions/{DISCUSSION_ID}/pin").json()
        assert data["is_pinned"] is False
        assert fake_supabase.queries("rpc:log_moderation_action")[0].params["p_action_type"] == "unpin"

    def test_missing_discussion(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        assert client.post(f"/api/admin/discussions/{DISCUSSION_ID}/lock").status_code == 404

    def test_non_uuid_discussion(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        assert client.post("/api/admin/discussions/not-a-uuid/lock").status_code == 404
        fake_supabase.with_role("moderator")
        assert client.post("/api/admin/discussions/not-a-uuid/pin").status_code == 404
        assert fake_supabase.queries("forum_discussions") == []


class TestStats:
    def test_defaults_to_zero(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        data = client.get("/api/admin/stats").json()
        assert data["total_ban_actions"] == 0
        assert data["actions_last_7d"] == 0

    def test_null_counts_become_zero(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        fake_supabase.queue("moderation_stats", [{"total_pin_actions": 4, "total_lock_actions": None}])
        data = client.get("/api/admin/stats").json()
        assert data["total_pin_actions"] == 4
        assert data["total_lock_actions"] == 0

    def test_logs(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("moderator")
        fake_supabase.queue("moderation_logs", [{
            "id": "log-1", "moderator_id": USER_ID, "action_type": "lock",
            "target_type": "discussion", "target_id": DISCUSSION_ID, "created_at": "2030-01-01T00:00:00Z",
        }])
        assert client.get("/api/admin/moderation-logs").json()[0]["action_type"] == "lock"
