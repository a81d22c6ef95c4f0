"""Pytest configuration and fixtures."""

import os

import pytest

# Set before test modules import the app so settings resolve at import time
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("QA_ENV", "test")


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["QA_ENV"] = "test"

    from qareport.core.config import get_settings

    get_settings.cache_clear()


@pytest.fixture
def saver():
    from tests.fixtures_qa import FakeSaver

    return FakeSaver()


@pytest.fixture
def client(saver):
    """TestClient authenticated as USER_ID with the fake checklist saver."""
    from fastapi.testclient import TestClient

    from qareport.core.auth_middleware import AuthContext, require_auth
    from qareport.core.autosave import get_checklist_saver
    from qareport.core.schemas_qa import Profile
    from qareport.main import app
    from tests.fixtures_qa import USER_ID

    auth = AuthContext(
        user_id=USER_ID,
        email="sam@example.com",
        token="test-token",
        profile=Profile(id=USER_ID, email="sam@example.com", full_name="Sam Reviewer"),
    )
    app.dependency_overrides[require_auth] = lambda: auth
    app.dependency_overrides[get_checklist_saver] = lambda: saver

    yield TestClient(app)

    app.dependency_overrides.clear()
