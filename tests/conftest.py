"""Shared pytest fixtures and configuration."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from backend.app import create_app
from backend.dependencies import get_store
from models.config_models import Config, CredentialsConfig
from utils.passwords import hash_password

ADMIN_ID = "a1a1a1a1-0000-0000-0000-000000000001"
COLLABORATOR_ID = "c0c0c0c0-0000-0000-0000-000000000001"
ADMIN_PASSWORD = "senha-super-secreta"
ACCESS_CODE = "4321"

ALL_PERMISSIONS = {
    "can_create_collaborator": True,
    "can_create_admin": True,
    "can_enter_hours": True,
    "can_change_access_code": True,
}


def admin_record(**permissions):
    """Administrator row as returned by get_administrator (no hash)."""
    record = {"id": ADMIN_ID, "full_name": "Ana Admin", "username": "ana"}
    record.update(ALL_PERMISSIONS)
    record.update(permissions)
    return record


@pytest.fixture
def test_env(monkeypatch, tmp_path):
    """
    Set valid test environment variables.

    This fixture sets up valid test environment variables so config
    can be loaded during tests without requiring real credentials.
    """
    monkeypatch.setenv("SUPABASE_URL", "https://test-project.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test_supabase_key_1234567890")
    monkeypatch.setenv("SESSION_SECRET", "test_session_secret_1234567890")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    for name in ("DATABASE_URL", "CORS_ORIGINS", "COOKIE_SECURE", "SESSION_MAX_AGE_DAYS"):
        monkeypatch.delenv(name, raising=False)

    return {
        "supabase_url": "https://test-project.supabase.co",
        "supabase_key": "test_supabase_key_1234567890",
        "session_secret": "test_session_secret_1234567890",
        "log_level": "DEBUG",
    }


@pytest.fixture
def invalid_env(monkeypatch):
    """
    Set up invalid/missing environment variables for testing validation.
    """
    monkeypatch.setenv("SUPABASE_URL", "")
    monkeypatch.setenv("SUPABASE_KEY", "")
    monkeypatch.setenv("SESSION_SECRET", "")


@pytest.fixture
def app_config():
    """Valid Config object for building the app in tests."""
    return Config(
        credentials=CredentialsConfig(
            supabase_url="https://test-project.supabase.co",
            supabase_key="test_supabase_key_1234567890",
            session_secret="test_session_secret_1234567890",
        ),
        log_level="DEBUG",
    )


@pytest.fixture
def mock_store():
    """
    Mock SupabaseClient.

    get_administrator answers with a full-permission administrator, which is
    what require_permission checks on every admin write.
    """
    store = Mock()
    store.get_administrator.return_value = admin_record()
    return store


@pytest.fixture
def client(app_config, mock_store):
    """Create FastAPI test client with the store replaced by mock_store."""
    app = create_app(app_config)
    app.dependency_overrides[get_store] = lambda: mock_store
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client, mock_store):
    """Test client holding an administrator session."""
    mock_store.get_administrator_by_username.return_value = {
        "id": ADMIN_ID,
        "username": "ana",
        "password_hash": hash_password(ADMIN_PASSWORD, rounds=4),
    }
    response = client.post("/api/auth/admin-login", json={"username": "ana", "password": ADMIN_PASSWORD})
    assert response.status_code == 200

    mock_store.reset_mock()
    return client


@pytest.fixture
def collaborator_client(client, mock_store):
    """Test client holding a full collaborator session."""
    mock_store.get_collaborator_by_badge.return_value = {
        "id": COLLABORATOR_ID,
        "full_name": "Carlos Colaborador",
        "badge_number": "1001",
        "access_code": ACCESS_CODE,
        "is_active": True,
    }
    response = client.post(
        "/api/auth/collaborator-login",
        json={"badgeNumber": "1001", "accessCode": ACCESS_CODE}
    )
    assert response.status_code == 200

    mock_store.reset_mock()
    return client
