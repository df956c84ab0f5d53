"""
Tests for the authentication endpoints.

These tests use FastAPI's TestClient to test the API without
requiring a running server or real Supabase connection.
"""

from tests.conftest import ACCESS_CODE, ADMIN_ID, ADMIN_PASSWORD, COLLABORATOR_ID
from utils.passwords import hash_password


def collaborator_row(**overrides):
    row = {
        "id": COLLABORATOR_ID,
        "full_name": "Carlos Colaborador",
        "badge_number": "1001",
        "access_code": ACCESS_CODE,
        "is_active": True,
    }
    row.update(overrides)
    return row


class TestAdminLogin:
    """Tests for POST /api/auth/admin-login."""

    def setup_admin(self, mock_store):
        mock_store.get_administrator_by_username.return_value = {
            "id": ADMIN_ID,
            "username": "ana",
            "password_hash": hash_password(ADMIN_PASSWORD, rounds=4),
        }

    def test_login_sets_admin_session(self, client, mock_store):
        self.setup_admin(mock_store)

        response = client.post("/api/auth/admin-login", json={"username": "ana", "password": ADMIN_PASSWORD})

        assert response.status_code == 200
        assert "session" in response.cookies

        session = client.get("/api/auth/get-session").json()["session"]
        assert session["user_id"] == ADMIN_ID
        assert session["user_type"] == "admin"
        assert session["role"] == "admin"

    def test_wrong_password(self, client, mock_store):
        self.setup_admin(mock_store)

        response = client.post("/api/auth/admin-login", json={"username": "ana", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Usuário ou senha inválidos."

    def test_unknown_username_same_answer(self, client, mock_store):
        mock_store.get_administrator_by_username.return_value = None

        response = client.post("/api/auth/admin-login", json={"username": "ghost", "password": "x"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Usuário ou senha inválidos."

    def test_missing_fields(self, client, mock_store):
        response = client.post("/api/auth/admin-login", json={})
        assert response.status_code == 401
        mock_store.get_administrator_by_username.assert_not_called()

    def test_store_error(self, client, mock_store):
        mock_store.get_administrator_by_username.side_effect = Exception("db down")

        response = client.post("/api/auth/admin-login", json={"username": "ana", "password": "x"})

        assert response.status_code == 500


class TestCollaboratorLogin:
    """Tests for POST /api/auth/collaborator-login."""

    def login(self, client, **body):
        return client.post("/api/auth/collaborator-login", json=body)

    def test_login_with_access_code(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row()

        response = self.login(client, badgeNumber="1001", accessCode=ACCESS_CODE)

        assert response.status_code == 200
        session = client.get("/api/auth/get-session").json()["session"]
        assert session["user_type"] == "collaborator"
        assert session["role"] == "collaborator"
        assert session["pending_access_code"] is False

    def test_access_code_compared_without_surrounding_spaces(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row()

        response = self.login(client, badgeNumber="1001", accessCode=f" {ACCESS_CODE} ")

        assert response.status_code == 200

    def test_wrong_access_code(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row()

        response = self.login(client, badgeNumber="1001", accessCode="0000")

        assert response.status_code == 401
        assert response.json()["detail"] == "Código de acesso inválido."
        assert client.get("/api/auth/get-session").status_code == 401

    def test_missing_badge(self, client, mock_store):
        response = self.login(client, accessCode=ACCESS_CODE)
        assert response.status_code == 400
        assert response.json()["detail"] == "Número do crachá é obrigatório."

    def test_unknown_badge(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = None

        response = self.login(client, badgeNumber="9999", accessCode="1")

        assert response.status_code == 401

    def test_inactive_collaborator(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row(is_active=False)

        response = self.login(client, badgeNumber="1001", accessCode=ACCESS_CODE)

        assert response.status_code == 401

    def test_badge_lookup_error(self, client, mock_store):
        mock_store.get_collaborator_by_badge.side_effect = Exception("timeout")

        response = self.login(client, badgeNumber="1001")

        assert response.status_code == 500
        assert response.json()["detail"] == "Erro ao verificar o crachá. Tente novamente."

    def test_code_required_when_registered(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row()

        response = self.login(client, badgeNumber="1001")

        assert response.status_code == 200
        assert response.json()["accessCodeRequired"] is True
        assert client.get("/api/auth/get-session").status_code == 401

    def test_first_login_starts_pending_session(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row(access_code=None)

        response = self.login(client, badgeNumber="1001")

        assert response.status_code == 200
        assert response.json()["needsAccessCodeSetup"] is True
        session = client.get("/api/auth/get-session").json()["session"]
        assert session["pending_access_code"] is True

    def test_code_sent_but_none_registered(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row(access_code=None)

        response = self.login(client, badgeNumber="1001", accessCode="1234")

        assert response.status_code == 400


class TestSessionEndpoints:
    """Tests for get-session, logout and clear-pending-access-code."""

    def test_no_session(self, client):
        response = client.get("/api/auth/get-session")
        assert response.status_code == 401
        assert response.json()["detail"] == "Nenhuma sessão ativa."

    def test_logout_clears_session(self, admin_client):
        response = admin_client.post("/api/auth/logout")

        assert response.status_code == 200
        assert admin_client.get("/api/auth/get-session").status_code == 401

    def test_clear_pending_access_code(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row(access_code=None)
        client.post("/api/auth/collaborator-login", json={"badgeNumber": "1001"})

        response = client.post("/api/auth/clear-pending-access-code")

        assert response.json()["message"] == "Sessão atualizada."
        session = client.get("/api/auth/get-session").json()["session"]
        assert session["pending_access_code"] is False
        assert session["user_id"] == COLLABORATOR_ID

    def test_clear_pending_without_flag(self, collaborator_client):
        response = collaborator_client.post("/api/auth/clear-pending-access-code")
        assert response.json()["message"] == "Nenhuma sessão pendente para limpar."

    def test_tampered_cookie_rejected(self, admin_client):
        admin_client.cookies.clear()
        admin_client.cookies.set("session", "forged-value")
        assert admin_client.get("/api/auth/get-session").status_code == 401


class TestForgotAccessCode:
    """Tests for POST /api/auth/forgot-access-code."""

    def test_known_badge(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = collaborator_row()

        response = client.post("/api/auth/forgot-access-code", json={"badgeNumber": "1001"})

        assert response.status_code == 200
        assert ACCESS_CODE not in response.text

    def test_unknown_badge(self, client, mock_store):
        mock_store.get_collaborator_by_badge.return_value = None

        response = client.post("/api/auth/forgot-access-code", json={"badgeNumber": "9999"})

        assert response.status_code == 404

    def test_missing_badge(self, client):
        response = client.post("/api/auth/forgot-access-code", json={})
        assert response.status_code == 400
