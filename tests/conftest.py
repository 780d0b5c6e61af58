# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

import pytest
from unittest.mock import Mock

from consolectl.http_client import ConfigAPIClient

BASE_URL = "http://webui.test"


def build_url(api_base, path=""):
    return f"{BASE_URL}{api_base}{path}"


@pytest.fixture
def mock_client():
    """Config API client double: URLs resolve against BASE_URL, writes succeed."""
    client = Mock(spec=ConfigAPIClient)
    client.url.side_effect = build_url
    client.send_json.return_value = {}
    client.delete.return_value = True
    return client


@pytest.fixture
def route_json(mock_client):
    """Serve GET bodies from a {url: body} mapping; exceptions in the mapping are raised."""
    def _route(routes):
        def _get_json(url, params=None):
            body = routes[url]
            if isinstance(body, Exception):
                raise body
            return body
        mock_client.get_json.side_effect = _get_json
        return mock_client
    return _route
