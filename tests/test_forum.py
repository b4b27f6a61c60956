from tests.fakes import DISCUSSION_ID, OTHER_USER_ID, POST_ID, USER_ID

DISCUSSION_ROW = {
    "id": DISCUSSION_ID,
    "author_id": OTHER_USER_ID,
    "title": "Best festival shorts?",
    "content": "Share your picks",
    "category": "general",
    "tags": ["festival"],
    "is_locked": False,
    "reply_count": 3,
}

POST_ROW = {
    "id": POST_ID,
    "discussion_id": DISCUSSION_ID,
    "author_id": USER_ID,
    "content": "Check out Sore Hari",
}


class TestListDiscussions:
    def test_sort_by_replies(self, client, fake_supabase):
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW], count=30)
        response = client.get("/api/forum?sort=most_replies&category=general&limit=10&offset=10")
        data = response.json()
        assert data["has_more"] is True
        query = fake_supabase.queries("forum_discussions")[0]
        assert query.called("order")[0][1] == ("reply_count",)
        assert ("eq", ("category", "general"), {}) in query.calls

    def test_unknown_sort_falls_back_to_latest(self, client, fake_supabase):
        client.get("/api/forum?sort=random")
        query = fake_supabase.queries("forum_discussions")[0]
        assert query.called("order")[0][1] == ("last_activity_at",)


class TestCreateDiscussion:
    def test_create(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("forum_discussions", [{**DISCUSSION_ROW, "author_id": USER_ID}])
        response = client.post("/api/forum", json={
            "title": " Best festival shorts? ",
            "content": "Share your picks",
            "category": "general",
            "tags": ["Festival", "Shorts", "", "a", "b", "c", "d"],
        })
        assert response.status_code == 201
        assert response.json()["is_author"] is True
        inserted = fake_supabase.payloads("forum_discussions", "insert")[0]
        assert inserted["title"] == "Best festival shorts?"
        assert inserted["tags"] == ["festival", "shorts", "a", "b", "c"]

    def test_tags_must_be_a_list(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = client.post("/api/forum", json={
            "title": "t", "content": "c", "category": "general", "tags": "festival"
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "Tags must be an array"

    def test_title_too_long(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = client.post("/api/forum", json={"title": "x" * 201, "content": "c", "category": "general"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Title must be 200 characters or less"

    def test_invalid_category(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = client.post("/api/forum", json={"title": "t", "content": "c", "category": "gossip"})
        assert response.json()["detail"] == "Invalid category"

    def test_requires_login(self, client):
        assert client.post("/api/forum", json={"title": "t"}).status_code == 401


class TestGetDiscussion:
    def test_counts_view(self, client, fake_supabase, login):
        login(user_id=OTHER_USER_ID)
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        data = client.get(f"/api/forum/{DISCUSSION_ID}").json()
        assert data["is_author"] is True
        rpc = fake_supabase.queries("rpc:increment_discussion_views")[0]
        assert rpc.params == {"p_discussion_id": DISCUSSION_ID}

    def test_not_found(self, client):
        assert client.get("/api/forum/no-such-discussion").status_code == 404


class TestUpdateDiscussion:
    def test_locked_discussion_cannot_be_edited(self, client, fake_supabase, login):
        login(user_id=OTHER_USER_ID)
        fake_supabase.with_role("user", user_id=OTHER_USER_ID)
        fake_supabase.queue("forum_discussions", [{**DISCUSSION_ROW, "is_locked": True}])
        response = client.patch(f"/api/forum/{DISCUSSION_ID}", json={"title": "New"})
        assert response.status_code == 403

    def test_only_author_can_edit(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        assert client.patch(f"/api/forum/{DISCUSSION_ID}", json={"title": "New"}).status_code == 403

    def test_no_fields(self, client, fake_supabase, login):
        login(user_id=OTHER_USER_ID)
        fake_supabase.with_role("user", user_id=OTHER_USER_ID)
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        response = client.patch(f"/api/forum/{DISCUSSION_ID}", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "No valid fields to update"


class TestDeleteDiscussion:
    def test_moderator_delete_is_logged(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        fake_supabase.with_role("moderator")
        response = client.delete(f"/api/forum/{DISCUSSION_ID}")
        assert response.status_code == 200
        log = fake_supabase.queries("rpc:log_moderation_action")[0].params
        assert log["p_action_type"] == "delete_discussion"
        assert log["p_target_id"] == DISCUSSION_ID

    def test_member_cannot_delete_others(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        fake_supabase.with_role("curator")
        assert client.delete(f"/api/forum/{DISCUSSION_ID}").status_code == 403


class TestPosts:
    def test_reply_bumps_count_and_notifies_author(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        fake_supabase.queue("forum_posts", [POST_ROW])
        response = client.post(f"/api/forum/{DISCUSSION_ID}/posts", json={"content": "Check out Sore Hari"})
        assert response.status_code == 201

        bump = fake_supabase.payloads("forum_discussions", "update")[0]
        assert bump["reply_count"] == 4
        assert "last_activity_at" in bump
        notification = fake_supabase.payloads("notifications", "insert")[0]
        assert notification["user_id"] == OTHER_USER_ID
        assert notification["actor_id"] == USER_ID
        assert notification["type"] == "forum_reply"

    def test_reply_to_own_discussion_does_not_notify(self, client, fake_supabase, login):
        login(user_id=OTHER_USER_ID)
        fake_supabase.with_role("user", user_id=OTHER_USER_ID)
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        fake_supabase.queue("forum_posts", [{**POST_ROW, "author_id": OTHER_USER_ID}])
        assert client.post(f"/api/forum/{DISCUSSION_ID}/posts", json={"content": "Thanks"}).status_code == 201
        assert not fake_supabase.queries("notifications")

    def test_locked_discussion_rejects_replies(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("forum_discussions", [{**DISCUSSION_ROW, "is_locked": True}])
        response = client.post(f"/api/forum/{DISCUSSION_ID}/posts", json={"content": "hello"})
        assert response.status_code == 403
        assert not fake_supabase.queries("forum_posts")

    def test_post_too_long(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        response = client.post(f"/api/forum/{DISCUSSION_ID}/posts", json={"content": "x" * 5001})
        assert response.status_code == 400
        assert response.json()["detail"] == "Content must be 5,000 characters or less"

    def test_edit_post_in_locked_discussion(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("forum_posts", [{"author_id": USER_ID, "discussion_id": DISCUSSION_ID}])
        fake_supabase.queue("forum_discussions", [{"is_locked": True}])
        response = client.patch(f"/api/forum/posts/{POST_ID}", json={"content": "edit"})
        assert response.status_code == 403

    def test_delete_post_never_goes_below_zero(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("forum_posts", [{"author_id": USER_ID, "discussion_id": DISCUSSION_ID}])
        fake_supabase.queue("forum_discussions", [{"reply_count": 0}])
        response = client.delete(f"/api/forum/posts/{POST_ID}")
        assert response.status_code == 200
        assert fake_supabase.payloads("forum_discussions", "update") == [{"reply_count": 0}]

    def test_list_posts_marks_authorship(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("forum_discussions", [{"id": DISCUSSION_ID}])
        fake_supabase.queue("forum_posts", [POST_ROW, {**POST_ROW, "id": "p2", "author_id": OTHER_USER_ID}])
        data = client.get(f"/api/forum/{DISCUSSION_ID}/posts").json()
        assert [p["is_author"] for p in data] == [True, False]


class TestLikes:
    def test_guest_status(self, client):
        assert client.get(f"/api/forum/{DISCUSSION_ID}/like").json() == {"is_liked": False}

    def test_duplicate_like(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("forum_discussions", [{"id": DISCUSSION_ID}])
        fake_supabase.queue("forum_discussion_likes", [{"id": "like-1"}])
        assert client.post(f"/api/forum/{DISCUSSION_ID}/like").status_code == 409

    def test_like(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("forum_discussions", [{"id": DISCUSSION_ID}])
        assert client.post(f"/api/forum/{DISCUSSION_ID}/like").status_code == 200
        assert fake_supabase.payloads("forum_discussion_likes", "insert") == [
            {"discussion_id": DISCUSSION_ID, "user_id": USER_ID}
        ]


class TestUserActivity:
    def test_activity(self, client, fake_supabase):
        fake_supabase.queue("profiles", [{"id": USER_ID, "name": "Rina"}])
        fake_supabase.queue("forum_discussions", [DISCUSSION_ROW])
        fake_supabase.queue("forum_posts", [POST_ROW, {**POST_ROW, "id": "p2"}])
        data = client.get(f"/api/forum/user/{USER_ID}").json()
        assert data["stats"] == {"total_discussions": 1, "total_posts": 2}

    def test_unknown_user(self, client, fake_supabase):
        assert client.get(f"/api/forum/user/{USER_ID}").status_code == 404
