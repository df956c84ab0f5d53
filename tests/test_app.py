"""Tests for the app factory: middleware and global error handling."""

from fastapi.testclient import TestClient

from backend.app import create_app
from backend.dependencies import get_store


class TestCreateApp:
    """Tests for create_app()."""

    def test_routes_mounted(self, app_config):
        app = create_app(app_config)
        paths = app.openapi()["paths"]

        assert "/api/auth/admin-login" in paths
        assert "/api/admin/time-entry" in paths
        assert "/api/collaborator/time-bank-period" in paths
        assert "/api/notifications/mark-read" in paths
        assert "/api/info-banners" in paths

    def test_cors_allows_configured_origin(self, client):
        response = client.options(
            "/api/auth/admin-login",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_secure_cookie(self, app_config, mock_store):
        config = app_config.model_copy(update={"cookie_secure": True})
        app = create_app(config)
        app.dependency_overrides[get_store] = lambda: mock_store
        mock_store.get_collaborator_by_badge.return_value = {
            "id": "c1", "badge_number": "1001", "access_code": None, "is_active": True,
        }

        with TestClient(app, base_url="https://testserver") as secure_client:
            response = secure_client.post("/api/auth/collaborator-login", json={"badgeNumber": "1001"})

        set_cookie = response.headers["set-cookie"].lower()
        assert "secure" in set_cookie
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie


class TestErrorHandlers:
    """Tests for the registered exception handlers."""

    def test_validation_error_is_400(self, client):
        response = client.post("/api/auth/collaborator-login", content="not json",
                               headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Requisição inválida."
        assert response.json()["errors"]

    def test_unhandled_error_is_500_without_details(self, app_config, mock_store):
        app = create_app(app_config)
        app.dependency_overrides[get_store] = lambda: mock_store

        @app.get("/api/boom")
        def boom():
            raise RuntimeError("secret internals")

        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/api/boom")

        assert response.status_code == 500
        assert response.json() == {"detail": "Erro interno do servidor."}
