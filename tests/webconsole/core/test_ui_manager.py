# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

import pytest
from webconsole.core.context import AppContext


@pytest.fixture
def ctx(mock_client):
    mock_client.get_json.return_value = []
    return AppContext(client=mock_client)


def test_default_section(ctx):
    assert ctx.current_section == "device-groups"


def test_show_section_loads_manager(mock_client, ctx):
    ctx.ui_manager.show_section("gnb-inventory")

    assert ctx.current_section == "gnb-inventory"
    mock_client.get_json.assert_called_once_with("http://webui.test/config/v1/inventory/gnb")
    assert ctx.ui_manager.view() == "*No gNBs found*"


def test_subscribers_section_loads_k4_keys(mock_client, ctx):
    """Test the combined subscribers section loads the K4 keys"""
    ctx.ui_manager.show_section("subscribers")
    mock_client.get_json.assert_called_once_with("http://webui.test/api/k4opt")


def test_detail_sections_do_not_reload(mock_client, ctx):
    assert ctx.ui_manager.show_section("gnb-details") is None
    assert ctx.current_section == "gnb-details"
    mock_client.get_json.assert_not_called()


def test_unknown_section(ctx):
    with pytest.raises(ValueError, match="Unknown section: dashboard"):
        ctx.ui_manager.show_section("dashboard")
    assert ctx.current_section == "device-groups"


def test_refresh_current_section(mock_client, ctx):
    ctx.current_section = "upf-inventory"
    ctx.ui_manager.refresh()
    mock_client.get_json.assert_called_once_with("http://webui.test/config/v1/inventory/upf")
