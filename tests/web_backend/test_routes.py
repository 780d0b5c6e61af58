"""
Unit tests for the Web Console REST API.

Routes run against a ConsoleService backed by a mocked config API client.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch

from consolectl.http_client import APIConnectionError, APIResponseError
from web_backend.api.dependencies import get_service
from web_backend.main import app
from web_backend.services.console_service import ConsoleService
from webconsole.core.context import AppContext

PREFIX = "/api/v1"
GNB_URL = "http://webui.test/config/v1/inventory/gnb"


@pytest.fixture
def service(mock_client):
    return ConsoleService(AppContext(client=mock_client))


@pytest.fixture
def api(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    """Tests for health and root endpoints."""

    def test_health(self, api):
        response = api.get(f"{PREFIX}/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, api):
        body = api.get("/").json()
        assert body["health"] == f"{PREFIX}/health"
        assert "gnb-inventory" in body["sections"]
        assert "k4-key" in body["types"]

    def test_unreachable_config_api(self, api, service):
        with patch.object(service, "get_notifications", side_effect=APIConnectionError("refused")):
            response = api.get(f"{PREFIX}/notifications")

        assert response.status_code == 503
        assert response.json() == {"error": "Config API error", "message": "refused"}


class TestSections:
    """Tests for section and subscriber listing."""

    def test_list_section(self, api, mock_client):
        mock_client.get_json.return_value = [{"name": "gnb-1", "tac": 1}]

        response = api.get(f"{PREFIX}/sections/gnb-inventory")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["items"] == [{"name": "gnb-1", "tac": 1}]
        assert "| gnb-1 | 1 |" in body["view"]

    def test_unknown_section(self, api):
        response = api.get(f"{PREFIX}/sections/dashboard")
        assert response.status_code == 404

    def test_section_backend_failure(self, api, mock_client):
        mock_client.get_json.side_effect = APIResponseError(500, "HTTP 500: Internal Server Error")

        response = api.get(f"{PREFIX}/sections/upf-inventory")

        assert response.status_code == 502
        assert response.json()["detail"]["error"] == "Failed to load data: HTTP 500: Internal Server Error"

    def test_list_subscribers(self, api, mock_client):
        mock_client.get_json.return_value = {
            "items": [{"ueId": "imsi-001010000000001"}],
            "page": 1,
            "limit": 10,
            "total": 1,
            "pages": 1,
        }

        response = api.get(f"{PREFIX}/subscribers", params={"limit": 10, "plmn_id": "00101"})

        assert response.status_code == 200
        assert response.json()["meta"]["limit"] == 10
        params = mock_client.get_json.call_args.kwargs["params"]
        assert params["plmnID"] == "00101"
        assert params["limit"] == "10"


class TestItems:
    """Tests for item and form endpoints."""

    def test_get_item(self, api, mock_client):
        mock_client.get_json.return_value = {"hostname": "upf-1", "port": 8805}

        response = api.get(f"{PREFIX}/items/upf/upf-1")

        assert response.status_code == 200
        assert response.json()["data"] == {"hostname": "upf-1", "port": "8805"}

    def test_get_item_unknown_type(self, api):
        response = api.get(f"{PREFIX}/items/router/r1")
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "Unknown type: router"

    def test_get_item_missing(self, api, mock_client):
        mock_client.get_json.side_effect = APIResponseError(404, "HTTP 404: Not Found")
        response = api.get(f"{PREFIX}/items/gnb/gnb-9")
        assert response.status_code == 404

    def test_get_form(self, api):
        response = api.get(f"{PREFIX}/forms/gnb")

        assert response.status_code == 200
        body = response.json()
        assert body["is_edit"] is False
        assert [f["id"] for f in body["fields"]] == ["name", "tac"]

    def test_create_item(self, api, mock_client):
        mock_client.get_json.return_value = []

        response = api.post(
            f"{PREFIX}/items/gnb",
            json={"form_data": {"name": "gnb-2", "tac": 2}}
        )

        assert response.status_code == 201
        assert response.json()["message"] == "gNB created successfully"
        mock_client.send_json.assert_called_once_with(
            "POST", f"{GNB_URL}/gnb-2", {"name": "gnb-2", "tac": 2}
        )

    def test_create_item_invalid(self, api, mock_client):
        response = api.post(f"{PREFIX}/items/gnb", json={"form_data": {"tac": 0}})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == (
            "gNB name is required\nTAC must be between 1 and 16777215"
        )
        mock_client.send_json.assert_not_called()

    def test_update_item(self, api, mock_client):
        mock_client.get_json.side_effect = [{"name": "gnb-1", "tac": 1}, []]

        response = api.put(f"{PREFIX}/items/gnb/gnb-1", json={"form_data": {"tac": 4}})

        assert response.status_code == 200
        mock_client.send_json.assert_called_once_with(
            "PUT", f"{GNB_URL}/gnb-1", {"name": "gnb-1", "tac": 4}
        )

    def test_delete_item(self, api, mock_client, service):
        mock_client.get_json.return_value = []

        response = api.delete(f"{PREFIX}/items/gnb/gnb-1")

        assert response.status_code == 200
        mock_client.delete.assert_called_once_with(f"{GNB_URL}/gnb-1")
        assert service.ctx.notifications.last.message == "gNB deleted successfully"

    def test_delete_k4_key_failure(self, api, mock_client):
        mock_client.delete.side_effect = APIResponseError(404, "key not found")

        response = api.delete(f"{PREFIX}/k4-keys/1/K4_AES")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "Failed to delete K4 key: key not found"


class TestAdminAndNotifications:
    """Tests for sync-ssm actions and notifications."""

    def test_admin_action(self, api, mock_client):
        mock_client.get_text.return_value = Mock(ok=True, status_code=200, text="life ok")

        response = api.post(f"{PREFIX}/admin/check-k4-life")

        assert response.status_code == 200
        assert response.json()["message"] == "life ok"

    def test_admin_action_failure(self, api, mock_client):
        mock_client.get_text.return_value = Mock(ok=False, status_code=500, text="")

        response = api.post(f"{PREFIX}/admin/k4-rotation")

        assert response.status_code == 502
        assert response.json()["detail"]["message"] == "Rotation failed"

    def test_unknown_admin_action(self, api):
        assert api.post(f"{PREFIX}/admin/purge").status_code == 404

    def test_notifications_drain(self, api, mock_client):
        mock_client.get_text.return_value = Mock(ok=True, status_code=200, text="")
        api.post(f"{PREFIX}/admin/sync-key")

        first = api.get(f"{PREFIX}/notifications", params={"drain": True}).json()
        second = api.get(f"{PREFIX}/notifications").json()

        assert first["total"] == 1
        assert first["notifications"][0]["level"] == "success"
        assert second["total"] == 0
