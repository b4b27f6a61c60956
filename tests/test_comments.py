from tests.fakes import FakeAPIError, COMMENT_ID, FILM_ID, OTHER_USER_ID, USER_ID

BASE = f"/api/films/{FILM_ID}/comments"

COMMENT_ROW = {
    "id": COMMENT_ID,
    "film_id": FILM_ID,
    "user_id": USER_ID,
    "comment": "Beautiful cinematography",
    "rating": 5,
}


class TestListComments:
    def test_list(self, client, fake_supabase):
        fake_supabase.queue("rpc:get_film_comments", [{**COMMENT_ROW, "username": "rina", "is_liked": False}])
        fake_supabase.queue("film_comments", [], count=7)
        fake_supabase.queue("rpc:get_film_average_rating", 4.25)
        response = client.get(f"{BASE}?limit=10&offset=0")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 7
        assert data["average_rating"] == 4.25
        assert data["comments"][0]["username"] == "rina"
        assert fake_supabase.queries("rpc:get_film_comments")[0].params == {
            "p_film_id": FILM_ID, "p_limit": 10, "p_offset": 0
        }

    def test_no_ratings_average_is_zero(self, client, fake_supabase):
        fake_supabase.queue("rpc:get_film_average_rating", None)
        assert client.get(BASE).json()["average_rating"] == 0.0


class TestCreateComment:
    def test_create(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("films", [{"id": FILM_ID}])
        fake_supabase.queue("film_comments", [COMMENT_ROW])
        fake_supabase.queue("profiles", [{"username": "rina", "avatar": None}])
        response = client.post(BASE, json={"comment": "  Beautiful cinematography ", "rating": 5})
        assert response.status_code == 201
        comment = response.json()["comment"]
        assert comment["username"] == "rina"
        assert comment["is_liked"] is False
        assert fake_supabase.payloads("film_comments", "insert")[0]["comment"] == "Beautiful cinematography"

    def test_username_fallback(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("films", [{"id": FILM_ID}])
        fake_supabase.queue("film_comments", [COMMENT_ROW])
        response = client.post(BASE, json={"comment": "Nice"})
        assert response.json()["comment"]["username"] == "Unknown"

    def test_empty_comment(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = client.post(BASE, json={"comment": "   "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Comment is required"

    def test_rating_out_of_range(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = client.post(BASE, json={"comment": "ok", "rating": 6})
        assert response.status_code == 400
        assert response.json()["detail"] == "Rating must be between 1 and 5"

    def test_film_missing(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        assert client.post(BASE, json={"comment": "ok"}).status_code == 404

    def test_banned_member_cannot_comment(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user", is_banned=True, ban_expires_at=None)
        response = client.post(BASE, json={"comment": "ok"})
        assert response.status_code == 403
        assert not fake_supabase.queries("film_comments")


class TestUpdateComment:
    def test_only_owner_can_edit(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        fake_supabase.queue("film_comments", [{**COMMENT_ROW, "user_id": OTHER_USER_ID}])
        response = client.patch(f"{BASE}/{COMMENT_ID}", json={"comment": "edited"})
        assert response.status_code == 403

    def test_edit(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("film_comments", [COMMENT_ROW])
        fake_supabase.queue("film_comments", [{**COMMENT_ROW, "comment": "edited"}])
        response = client.patch(f"{BASE}/{COMMENT_ID}", json={"comment": "edited", "rating": 4})
        assert response.status_code == 200
        assert response.json()["comment"]["comment"] == "edited"
        update = fake_supabase.payloads("film_comments", "update")[0]
        assert update["rating"] == 4
        assert "updated_at" in update


class TestDeleteComment:
    def test_owner_delete_is_not_logged(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("film_comments", [COMMENT_ROW])
        response = client.delete(f"{BASE}/{COMMENT_ID}")
        assert response.status_code == 200
        assert fake_supabase.queries("film_comments", "delete")
        assert not fake_supabase.queries("rpc:log_moderation_action")

    def test_moderator_delete_is_logged(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("film_comments", [{**COMMENT_ROW, "user_id": OTHER_USER_ID}])
        fake_supabase.with_role("moderator")
        response = client.delete(f"{BASE}/{COMMENT_ID}")
        assert response.status_code == 200
        log = fake_supabase.queries("rpc:log_moderation_action")[0].params
        assert log["p_action_type"] == "delete_post"
        assert log["p_target_type"] == "comment"
        assert log["p_metadata"]["author_id"] == OTHER_USER_ID

    def test_member_cannot_delete_others(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("film_comments", [{**COMMENT_ROW, "user_id": OTHER_USER_ID}])
        fake_supabase.with_role("user")
        assert client.delete(f"{BASE}/{COMMENT_ID}").status_code == 403
        assert not fake_supabase.queries("film_comments", "delete")

    def test_comment_on_other_film_is_not_found(self, client, fake_supabase, login):
        login()
        assert client.delete(f"{BASE}/{COMMENT_ID}").status_code == 404


class TestCommentLikes:
    def test_like(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("film_comments", [COMMENT_ROW])
        fake_supabase.queue("film_comment_likes", [])
        response = client.post(f"{BASE}/{COMMENT_ID}/like")
        assert response.status_code == 200
        assert fake_supabase.payloads("film_comment_likes", "insert") == [
            {"comment_id": COMMENT_ID, "user_id": USER_ID}
        ]

    def test_duplicate_like(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("film_comments", [COMMENT_ROW])
        fake_supabase.queue("film_comment_likes", [{"id": "like-1"}])
        response = client.post(f"{BASE}/{COMMENT_ID}/like")
        assert response.status_code == 400
        assert response.json()["detail"] == "You already liked this comment"

    def test_unlike(self, client, fake_supabase, login):
        login()
        response = client.delete(f"{BASE}/{COMMENT_ID}/like")
        assert response.status_code == 200
        assert fake_supabase.queries("film_comment_likes", "delete")

    def test_database_error_on_like(self, client, fake_supabase, login):
        login()
        fake_supabase.queue("film_comments", [COMMENT_ROW])
        fake_supabase.queue("film_comment_likes", error=FakeAPIError("timeout"))
        assert client.post(f"{BASE}/{COMMENT_ID}/like").status_code == 500
