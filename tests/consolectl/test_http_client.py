"""
Unit tests for consolectl.http_client module.

Tests URL building and error conversion of the config API client.
"""

import pytest
import requests
from unittest.mock import Mock

from consolectl.constants import API_BASE, SUBSCRIBER_API_BASE, SSM_API_BASE
from consolectl.http_client import (
    APIConnectionError,
    APIResponseError,
    ConfigAPIClient,
    ConsoleClientError,
    load_console_config,
    quote_id,
)


def _response(status_code=200, json_body=None, text="", reason="OK"):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    response.text = text
    if json_body is not None:
        response.content = b"x"
        response.json.return_value = json_body
    else:
        response.content = text.encode()
        response.json.side_effect = ValueError("Expecting value")
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return ConfigAPIClient(
        config_url="http://webui:5000/",
        subscriber_url="http://subs:5001",
        ssm_url="http://ssm:5002",
        timeout=5,
        session=session,
    )


class TestURLs:
    """Tests for URL construction."""

    def test_url_per_api_base(self, client):
        assert client.url(API_BASE, "/device-group") == "http://webui:5000/config/v1/device-group"
        assert client.url(SUBSCRIBER_API_BASE, "/subscriber") == "http://subs:5001/api/subscriber"
        assert client.url(SSM_API_BASE, "/sync-key") == "http://ssm:5002/sync-ssm/sync-key"

    def test_quote_id_escapes_path_separators(self):
        assert quote_id("group/one two") == "group%2Fone%20two"
        assert quote_id(7) == "7"

    def test_from_config(self):
        client = ConfigAPIClient.from_config({
            "config_api_url": "http://cfg:5000",
            "request_timeout": 12,
        })
        assert client.url(API_BASE) == "http://cfg:5000/config/v1"
        assert client.timeout == 12


class TestGetJson:
    """Tests for JSON reads."""

    def test_returns_body(self, client, session):
        session.request.return_value = _response(json_body=["g1", "g2"])

        assert client.get_json("http://webui:5000/config/v1/device-group") == ["g1", "g2"]
        session.request.assert_called_once_with(
            "GET", "http://webui:5000/config/v1/device-group", params=None, timeout=5
        )

    def test_empty_body_is_none(self, client, session):
        session.request.return_value = _response(text="")
        assert client.get_json("http://x") is None

    def test_non_2xx_uses_status_and_reason(self, client, session):
        session.request.return_value = _response(status_code=404, reason="Not Found")

        with pytest.raises(APIResponseError) as exc_info:
            client.get_json("http://x")

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "HTTP 404: Not Found"

    def test_invalid_json(self, client, session):
        session.request.return_value = _response(text="<html>")
        with pytest.raises(ConsoleClientError, match="Invalid JSON"):
            client.get_json("http://x")

    def test_transport_failure(self, client, session):
        session.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(APIConnectionError, match="Failed to reach config API"):
            client.get_json("http://x")


class TestWrites:
    """Tests for POST/PUT/DELETE."""

    def test_send_json_created_returns_empty(self, client, session):
        session.request.return_value = _response(status_code=201, text="")

        assert client.send_json("POST", "http://x/gnb-1", {"name": "gnb-1"}) == {}
        session.request.assert_called_once_with(
            "POST",
            "http://x/gnb-1",
            json={"name": "gnb-1"},
            headers={"Content-Type": "application/json"},
            timeout=5,
        )

    def test_send_json_returns_decoded_body(self, client, session):
        session.request.return_value = _response(json_body={"status": "ok"})
        assert client.send_json("PUT", "http://x", {}) == {"status": "ok"}

    def test_send_json_error_carries_server_text(self, client, session):
        session.request.return_value = _response(status_code=400, text="slice name already exists")

        with pytest.raises(APIResponseError, match="slice name already exists"):
            client.send_json("POST", "http://x", {})

    def test_delete_error_without_body(self, client, session):
        session.request.return_value = _response(status_code=500, text="")

        with pytest.raises(APIResponseError, match="HTTP 500"):
            client.delete("http://x")

    def test_delete_success(self, client, session):
        session.request.return_value = _response(status_code=204, text="")
        assert client.delete("http://x") is True

    def test_get_text_does_not_check_status(self, client, session):
        response = _response(status_code=500, text="SSM down")
        session.request.return_value = response
        assert client.get_text("http://x") is response


class TestLoadConsoleConfig:
    """Tests for console.yaml loading."""

    def test_missing_file(self, tmp_path):
        assert load_console_config(str(tmp_path / "missing.yaml")) == {}

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "console.yaml"
        path.write_text("config_api_url: http://cfg:5000\nrequest_timeout: 10\n")

        assert load_console_config(str(path)) == {
            "config_api_url": "http://cfg:5000",
            "request_timeout": 10,
        }

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "console.yaml"
        path.write_text("")
        assert load_console_config(str(path)) == {}
