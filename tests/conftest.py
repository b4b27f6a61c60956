import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ["RATE_LIMIT"] = "10000/minute"

import pytest
from fastapi.testclient import TestClient

from soular.main import app
from soular.core.dependencies import get_current_user, get_optional_user
from soular.database.supabase_client import get_auth_client, get_supabase
from soular.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase, USER_ID


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def auth_client():
    """Client handed to sign-up, sign-in and sign-out; kept apart from fake_supabase."""
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase, auth_client):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    clear_auth_cache()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Sign a user in for the rest of the test by overriding the auth dependencies."""
    def _login(user_id=USER_ID, email="member@soular.test"):
        user = {"id": user_id, "email": email, "user_metadata": {}, "app_metadata": {}}
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user
        return user
    return _login
