from tests.fakes import USER_ID


def upload(client, bucket, folder=None, content=b"poster bytes", filename="poster.JPG"):
    data = {"bucket": bucket}
    if folder is not None:
        data["folder"] = folder
    return client.post("/api/upload", data=data, files={"file": (filename, content, "image/jpeg")})


class TestUpload:
    def test_curator_uploads_poster(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("curator")
        response = upload(client, "posters", folder="/2024/")
        assert response.status_code == 201
        data = response.json()
        assert data["bucket"] == "posters"
        assert data["path"].startswith("2024/")
        assert data["path"].endswith(".jpg")
        assert data["url"].endswith(data["path"])

    def test_member_cannot_upload_media(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        response = upload(client, "films")
        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden: Only curators and admins can upload to this bucket"
        assert not fake_supabase.storage.uploads

    def test_member_uploads_avatar(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user")
        assert upload(client, "avatars").status_code == 201

    def test_unknown_bucket(self, client, fake_supabase, login):
        login()
        response = upload(client, "secrets")
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid bucket name"

    def test_missing_bucket(self, client, login):
        login()
        assert upload(client, "").status_code == 400

    def test_empty_file(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        response = upload(client, "events", content=b"")
        assert response.status_code == 400
        assert response.json()["detail"] == "No file provided"

    def test_storage_failure(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        fake_supabase.storage.fail = True
        response = upload(client, "thumbnails")
        assert response.status_code == 400
        assert response.json()["detail"] == "Failed to upload file"

    def test_requires_login(self, client):
        assert upload(client, "avatars").status_code == 401


class TestDeleteUpload:
    def test_delete(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("admin")
        response = client.request("DELETE", "/api/upload", json={"bucket": "posters", "path": "2024/a.jpg"})
        assert response.json() == {"message": "File deleted successfully"}
        assert fake_supabase.storage.removed == [("posters", ["2024/a.jpg"])]

    def test_missing_path(self, client, login):
        login()
        response = client.request("DELETE", "/api/upload", json={"bucket": "posters"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Bucket and path are required"

    def test_member_cannot_delete_media(self, client, fake_supabase, login):
        login()
        fake_supabase.with_role("user", user_id=USER_ID)
        response = client.request("DELETE", "/api/upload", json={"bucket": "events", "path": "x.jpg"})
        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden: Only curators and admins can delete from this bucket"
