# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
REST transport for the 5G config API.

This module provides the ConfigAPIClient class that talks to the
/config/v1, /api and /sync-ssm surfaces of the configuration service
and converts transport and HTTP failures into client exceptions.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
import yaml

from .constants import (
    API_BASE,
    SUBSCRIBER_API_BASE,
    SSM_API_BASE,
    CONFIG_API_URL,
    SUBSCRIBER_API_URL,
    SSM_API_URL,
    REQUEST_TIMEOUT,
)

logger = logging.getLogger(__name__)


class ConsoleClientError(Exception):
    """Base exception for console client errors."""
    pass


class APIConnectionError(ConsoleClientError):
    """Raised when the config API cannot be reached."""
    pass


class APIResponseError(ConsoleClientError):
    """Raised when the config API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class SchemaValidationError(ConsoleClientError):
    """Raised when a response document does not match its entity schema."""
    pass


def quote_id(value: Any) -> str:
    """Percent-encode a path identifier (names may contain '/' or spaces)."""
    return quote(str(value), safe="")


def load_console_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load console configuration from YAML file.

    Args:
        config_path: Path to console.yaml. If None, uses default locations.

    Returns:
        Dict containing console configuration (empty when no file exists).
    """
    if config_path is None:
        search_paths = [
            Path("/app/config/console.yaml"),  # Docker container
            Path("config/console.yaml"),        # Local dev
        ]

        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    if config_path is None or not Path(config_path).exists():
        logger.debug("Console config not found, using environment defaults")
        return {}

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


class ConfigAPIClient:
    """HTTP client for the configuration service."""

    def __init__(
        self,
        config_url: Optional[str] = None,
        subscriber_url: Optional[str] = None,
        ssm_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            config_url: Host serving /config/v1. Defaults to CONFIG_API_URL.
            subscriber_url: Host serving /api. Defaults to SUBSCRIBER_API_URL.
            ssm_url: Host serving /sync-ssm. Defaults to SSM_API_URL.
            timeout: Per-request timeout in seconds.
            session: Optional pre-built requests session.
        """
        self.base_urls = {
            API_BASE: (config_url or CONFIG_API_URL).rstrip("/"),
            SUBSCRIBER_API_BASE: (subscriber_url or SUBSCRIBER_API_URL).rstrip("/"),
            SSM_API_BASE: (ssm_url or SSM_API_URL).rstrip("/"),
        }
        self.timeout = timeout or REQUEST_TIMEOUT
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ConfigAPIClient":
        """Build a client from a console.yaml mapping."""
        return cls(
            config_url=config.get("config_api_url"),
            subscriber_url=config.get("subscriber_api_url"),
            ssm_url=config.get("ssm_api_url"),
            timeout=config.get("request_timeout"),
        )

    def url(self, api_base: str, path: str = "") -> str:
        """Build an absolute URL for a path under one of the API prefixes."""
        host = self.base_urls.get(api_base, self.base_urls[API_BASE])
        return f"{host}{api_base}{path}"

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Send a request, converting transport failures.

        Raises:
            APIConnectionError: If the request could not be completed.
        """
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise APIConnectionError(f"Failed to reach config API: {e}") from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a JSON document.

        Returns:
            Decoded JSON body, or None for an empty body.

        Raises:
            APIResponseError: On non-2xx, as "HTTP {status}: {reason}".
        """
        response = self.request("GET", url, params=params)
        if not response.ok:
            raise APIResponseError(
                response.status_code,
                f"HTTP {response.status_code}: {response.reason}"
            )
        return self._decode(response)

    def send_json(self, method: str, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST/PUT a JSON body.

        Returns:
            Decoded response body, or {} for 201/204 and empty bodies.

        Raises:
            APIResponseError: On non-2xx, carrying the server error text.
        """
        response = self.request(
            method,
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        self._raise_with_body(response)
        if response.status_code in (201, 204):
            return {}
        body = self._decode(response)
        return body if body is not None else {}

    def delete(self, url: str) -> bool:
        """
        DELETE a resource.

        Raises:
            APIResponseError: On non-2xx, carrying the server error text.
        """
        response = self.request("DELETE", url)
        self._raise_with_body(response)
        return True

    def get_text(self, url: str) -> requests.Response:
        """GET a plain-text resource without status checking."""
        return self.request("GET", url)

    def _raise_with_body(self, response: requests.Response) -> None:
        if not response.ok:
            error_text = response.text
            raise APIResponseError(
                response.status_code,
                error_text or f"HTTP {response.status_code}"
            )

    def _decode(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ConsoleClientError(f"Invalid JSON from config API: {e}") from e


# Thread-safe singleton implementation
_client_instance: Optional[ConfigAPIClient] = None
_client_lock = threading.Lock()


def get_client() -> ConfigAPIClient:
    """
    Get or create the singleton config API client instance.

    Thread-safe implementation using double-checked locking.
    """
    global _client_instance
    if _client_instance is None:
        with _client_lock:
            if _client_instance is None:
                _client_instance = ConfigAPIClient.from_config(load_console_config())
    return _client_instance
