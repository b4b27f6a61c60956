from tests.fakes import FakeAPIError, FILM_ID

FILM_ROW = {
    "id": FILM_ID,
    "title": "Sore Hari",
    "slug": "sore-hari",
    "director": "Rina",
    "category": "Drama",
    "youtube_url": "https://youtu.be/abc",
    "year": 2023,
    "duration": 15,
}

NEW_FILM = {
    "title": "Sore Hari",
    "director": "Rina",
    "category": "Drama",
    "youtube_url": "https://youtu.be/abc",
}


class TestListFilms:
    def test_list_with_pagination(self, client, fake_supabase):
        fake_supabase.queue("films", [FILM_ROW], count=12)
        response = client.get("/api/films?limit=5&offset=5&category=Drama&search=sore")
        assert response.status_code == 200
        data = response.json()
        assert data["films"][0]["slug"] == "sore-hari"
        assert data["pagination"] == {"total": 12, "limit": 5, "offset": 5, "has_more": True}

        query = fake_supabase.queries("films")[0]
        assert ("eq", ("category", "Drama"), {}) in query.calls
        assert query.called("range")[0][1] == (5, 9)
        assert query.called("or_")[0][1][0] == "title.ilike.%sore%,description.ilike.%sore%"

    def test_all_category_is_not_filtered(self, client, fake_supabase):
        fake_supabase.queue("films", [], count=0)
        response = client.get("/api/films?category=all")
        assert response.json()["pagination"]["has_more"] is False
        assert not fake_supabase.queries("films")[0].called("eq")

    def test_database_error(self, client, fake_supabase):
        fake_supabase.queue("films", error=FakeAPIError("boom"))
        response = client.get("/api/films")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch films"


class TestGetFilm:
    def test_found_counts_a_view(self, client, fake_supabase):
        fake_supabase.queue("films", [FILM_ROW])
        response = client.get(f"/api/films/{FILM_ID}")
        assert response.status_code == 200
        assert response.json()["film"]["title"] == "Sore Hari"
        rpc = fake_supabase.queries("rpc:increment_film_views")[0]
        assert rpc.params == {"p_film_id": FILM_ID}

    def test_view_counter_failure_is_ignored(self, client, fake_supabase):
        fake_supabase.queue("films", [FILM_ROW])
        fake_supabase.queue("rpc:increment_film_views", error=FakeAPIError("rpc missing"))
        assert client.get(f"/api/films/{FILM_ID}").status_code == 200

    def test_not_found(self, client, fake_supabase):
        assert client.get(f"/api/films/{FILM_ID}").status_code == 404

    def test_malformed_id_is_not_found(self, client, fake_supabase):
        response = client.get("/api/films/not-a-uuid")
        assert response.status_code == 404
        assert fake_supabase.executed == []


class TestCreateFilm:
    def test_requires_login(self, client):
        assert client.post("/api/films", json=NEW_FILM).status_code == 401

    def test_create(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("films", [])
        fake_supabase.queue("films", [FILM_ROW])
        response = client.post("/api/films", json=NEW_FILM)
        assert response.status_code == 201
        assert response.json()["message"] == "Film created successfully"

        inserted = fake_supabase.payloads("films", "insert")[0]
        assert inserted["slug"] == "sore-hari"
        assert inserted["duration"] == 0
        assert inserted["is_published"] is True
        assert inserted["is_premium"] is False

    def test_missing_fields(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = client.post("/api/films", json={"title": "Only a title"})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Missing required fields")

    def test_invalid_category(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = client.post("/api/films", json={**NEW_FILM, "category": "Western"})
        assert response.status_code == 400
        assert "Invalid category" in response.json()["detail"]

    def test_duplicate_slug(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("films", [{"id": FILM_ID}])
        response = client.post("/api/films", json=NEW_FILM)
        assert response.status_code == 409
        assert not fake_supabase.queries("films", "insert")

    def test_unique_violation_on_insert(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        fake_supabase.queue("films", [])
        fake_supabase.queue("films", error=FakeAPIError("duplicate key", code="23505"))
        assert client.post("/api/films", json=NEW_FILM).status_code == 409
