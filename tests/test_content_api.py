"""
Tests for announcements and info banners.
"""

from storage.supabase_client import DuplicateRecordError
from tests.conftest import ADMIN_ID, admin_record


class TestAnnouncement:
    """Tests for /api/admin/announcement."""

    def test_get(self, admin_client, mock_store):
        mock_store.get_latest_announcement.return_value = {"content": "Feriado", "created_at": "2024-06-01"}
        assert admin_client.get("/api/admin/announcement").json() == {"content": "Feriado"}

    def test_get_empty(self, admin_client, mock_store):
        mock_store.get_latest_announcement.return_value = None
        assert admin_client.get("/api/admin/announcement").json() == {"content": ""}

    def test_save_replaces(self, admin_client, mock_store):
        mock_store.replace_announcement.return_value = {"id": "n1", "content": "Reunião às 10h"}

        response = admin_client.post("/api/admin/announcement", json={"content": "  Reunião às 10h "})

        assert response.status_code == 200
        mock_store.replace_announcement.assert_called_once_with("Reunião às 10h", ADMIN_ID)

    def test_save_empty(self, admin_client, mock_store):
        response = admin_client.post("/api/admin/announcement", json={"content": "   "})

        assert response.status_code == 400
        mock_store.replace_announcement.assert_not_called()

    def test_save_requires_permission(self, admin_client, mock_store):
        mock_store.get_administrator.return_value = admin_record(can_enter_hours=False)
        assert admin_client.post("/api/admin/announcement", json={"content": "x"}).status_code == 403


class TestPublicBanners:
    """Tests for GET /api/info-banners."""

    def test_no_session_needed(self, client, mock_store):
        mock_store.list_active_banners.return_value = [{"image_url": "https://cdn/x.png", "link_url": None}]

        response = client.get("/api/info-banners")

        assert response.status_code == 200
        assert response.json() == {"banners": [{"image_url": "https://cdn/x.png", "link_url": None}]}

    def test_errors_degrade_to_empty_list(self, client, mock_store):
        mock_store.list_active_banners.side_effect = Exception("db down")

        response = client.get("/api/info-banners")

        assert response.status_code == 200
        assert response.json() == {"banners": []}


class TestAdminBanners:
    """Tests for /api/admin/info-banners."""

    def test_list(self, admin_client, mock_store):
        mock_store.list_banners.return_value = [{"id": "b1", "order_index": 1}]
        assert admin_client.get("/api/admin/info-banners").json() == {"banners": [{"id": "b1", "order_index": 1}]}

    def test_create(self, admin_client, mock_store):
        mock_store.count_banners.return_value = 2
        mock_store.create_banner.return_value = {"id": "b3"}

        response = admin_client.post(
            "/api/admin/info-banners",
            json={"image_url": "https://cdn/b.png", "order_index": 3},
        )

        assert response.status_code == 200
        mock_store.create_banner.assert_called_once_with({
            "image_url": "https://cdn/b.png",
            "link_url": None,
            "order_index": 3,
            "is_active": True,
            "admin_id": ADMIN_ID,
        })

    def test_create_order_out_of_range(self, admin_client, mock_store):
        response = admin_client.post(
            "/api/admin/info-banners",
            json={"image_url": "https://cdn/b.png", "order_index": 6},
        )

        assert response.status_code == 400
        mock_store.create_banner.assert_not_called()

    def test_create_missing_image(self, admin_client):
        response = admin_client.post("/api/admin/info-banners", json={"order_index": 1})
        assert response.status_code == 400

    def test_create_limit_reached(self, admin_client, mock_store):
        mock_store.count_banners.return_value = 5

        response = admin_client.post(
            "/api/admin/info-banners",
            json={"image_url": "https://cdn/b.png", "order_index": 1},
        )

        assert response.status_code == 400
        mock_store.create_banner.assert_not_called()

    def test_create_duplicate_order(self, admin_client, mock_store):
        mock_store.count_banners.return_value = 1
        mock_store.create_banner.side_effect = DuplicateRecordError("duplicate key")

        response = admin_client.post(
            "/api/admin/info-banners",
            json={"image_url": "https://cdn/b.png", "order_index": 1},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Já existe um banner com esta ordem de exibição."

    def test_update_sent_fields_only(self, admin_client, mock_store):
        mock_store.update_banner.return_value = {"id": "b1", "is_active": False}

        response = admin_client.put("/api/admin/info-banners/b1", json={"is_active": False})

        assert response.status_code == 200
        mock_store.update_banner.assert_called_once_with("b1", {"is_active": False})

    def test_update_order_out_of_range(self, admin_client, mock_store):
        response = admin_client.put("/api/admin/info-banners/b1", json={"order_index": 0})

        assert response.status_code == 400
        mock_store.update_banner.assert_not_called()

    def test_update_unknown(self, admin_client, mock_store):
        mock_store.update_banner.return_value = None
        assert admin_client.put("/api/admin/info-banners/b9", json={"order_index": 2}).status_code == 404

    def test_delete(self, admin_client, mock_store):
        response = admin_client.delete("/api/admin/info-banners/b1")

        assert response.status_code == 200
        mock_store.delete_banner.assert_called_once_with("b1")

    def test_writes_require_permission(self, admin_client, mock_store):
        mock_store.get_administrator.return_value = admin_record(can_enter_hours=False)
        assert admin_client.delete("/api/admin/info-banners/b1").status_code == 403
