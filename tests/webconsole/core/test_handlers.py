# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

import pytest
from unittest.mock import Mock, patch

from consolectl.http_client import APIConnectionError, APIResponseError
from webconsole.core import handlers
from webconsole.core.context import AppContext, create_context

DEVICE_GROUP_URL = "http://webui.test/config/v1/device-group"
K4_URL = "http://webui.test/api/k4opt"


@pytest.fixture
def ctx(mock_client):
    return AppContext(client=mock_client)


def _ok(text):
    return Mock(ok=True, status_code=200, text=text)


def _failed(status_code, text):
    return Mock(ok=False, status_code=status_code, text=text)


# ============================================================================
# Context
# ============================================================================

def test_context_builds_all_managers(mock_client):
    ctx = create_context(client=mock_client, max_workers=2)

    assert set(ctx.managers) == {
        "device_groups",
        "network_slices",
        "gnb_inventory",
        "upf_inventory",
        "k4_manager",
        "subscriber_list_manager",
    }
    assert ctx.device_groups.max_workers == 2
    assert all(m.client is mock_client for m in ctx.managers.values())
    assert ctx.confirm("anything?") is True


def test_context_unknown_manager(ctx):
    with pytest.raises(ValueError, match="Unknown manager: routers"):
        ctx.get_manager("routers")


# ============================================================================
# Navigation
# ============================================================================

def test_show_section(mock_client, ctx):
    mock_client.get_json.return_value = None

    result = handlers.show_section(ctx, "device-groups")

    assert result.success is True
    assert result.data == {"section": "device-groups", "items": []}
    assert "No device groups found" in result.message


def test_show_section_unknown(ctx):
    result = handlers.show_section(ctx, "dashboard")
    assert result.success is False
    assert ctx.notifications.last.message == "Unknown section: dashboard"


def test_show_section_load_error(mock_client, ctx):
    mock_client.get_json.side_effect = APIConnectionError("Failed to reach config API: refused")
    result = handlers.show_section(ctx, "gnb-inventory")
    assert result.success is False
    assert result.error == "Failed to load data: Failed to reach config API: refused"


# ============================================================================
# K4 list delete
# ============================================================================

def test_delete_k4_item(mock_client, ctx):
    mock_client.get_json.return_value = []

    result = handlers.delete_k4_item(ctx, 1, "K4_AES")

    assert result.success is True
    mock_client.delete.assert_called_once_with(f"{K4_URL}/1/K4_AES")
    assert ctx.notifications.last.message == "K4 key deleted successfully!"


def test_delete_k4_item_prompt_and_cancel(mock_client):
    confirm = Mock(return_value=False)
    ctx = AppContext(client=mock_client, confirm=confirm)

    result = handlers.delete_k4_item(ctx, 1, "K4_AES")

    assert result.success is False
    confirm.assert_called_once_with("Are you sure you want to delete K4 key with SNO 1 and label K4_AES?")
    mock_client.delete.assert_not_called()


def test_delete_k4_item_failure(mock_client, ctx):
    mock_client.delete.side_effect = APIResponseError(404, "key not found")
    result = handlers.delete_k4_item(ctx, 1, "K4_AES")
    assert result.success is False
    assert ctx.notifications.last.message == "Failed to delete K4 key: key not found"


# ============================================================================
# Details view
# ============================================================================

def test_show_details_navigates(mock_client, ctx):
    mock_client.get_json.return_value = {"group-name": "g1", "imsis": []}

    result = handlers.show_details(ctx, "device-group", "g1")

    assert result.success is True
    assert ctx.current_section == "device-group-details"
    assert ctx.ui_manager.view() == ctx.device_groups.details_view
    mock_client.get_json.assert_called_once_with(f"{DEVICE_GROUP_URL}/g1")


def test_show_details_error(mock_client, ctx):
    mock_client.get_json.side_effect = APIResponseError(404, "HTTP 404: Not Found")

    result = handlers.show_details(ctx, "network-slice", "s9")

    assert result.success is False
    assert ctx.notifications.last.message == "Error loading network slice details"
    assert ctx.current_section == "device-groups"


def test_show_details_not_available(ctx):
    result = handlers.show_details(ctx, "upf", "upf-1")
    assert result.error == "Details are not available for UPF"


def test_toggle_and_cancel_edit(mock_client, ctx):
    mock_client.get_json.return_value = {"name": "gnb-1", "tac": 1}
    handlers.show_details(ctx, "gnb", "gnb-1")

    toggled = handlers.toggle_edit_mode(ctx, "gnb")
    assert toggled.data == {"edit_mode": True, "values": {"name": "gnb-1", "tac": 1}}

    cancelled = handlers.cancel_edit(ctx, "gnb")
    assert cancelled.data["edit_mode"] is False


def test_save_details_edit(mock_client, ctx):
    mock_client.get_json.return_value = {"name": "gnb-1", "tac": 1}
    handlers.show_details(ctx, "gnb", "gnb-1")

    result = handlers.save_details_edit(ctx, "gnb", {"name": "gnb-1", "tac": 2})

    assert result.success is True
    assert ctx.notifications.last.message == "gNB updated successfully"


def test_save_details_edit_invalid(mock_client, ctx):
    mock_client.get_json.return_value = {"name": "gnb-1", "tac": 1}
    handlers.show_details(ctx, "gnb", "gnb-1")

    result = handlers.save_details_edit(ctx, "gnb", {"name": "gnb-1", "tac": 0})

    assert result.success is False
    assert ctx.notifications.last.message == "TAC must be between 1 and 16777215"
    mock_client.send_json.assert_not_called()


def test_delete_from_details_returns_to_list(mock_client):
    confirm = Mock(return_value=True)
    ctx = AppContext(client=mock_client, confirm=confirm)
    mock_client.get_json.side_effect = [{"name": "gnb-1", "tac": 1}, []]
    handlers.show_details(ctx, "gnb", "gnb-1")

    result = handlers.delete_from_details(ctx, "gnb")

    assert result.success is True
    confirm.assert_called_once_with(
        'Are you sure you want to delete the gnb "gnb-1"? This action cannot be undone.'
    )
    assert ctx.current_section == "gnb-inventory"
    assert ctx.notifications.last.message == "gNB deleted successfully"


def test_delete_from_details_failure(mock_client, ctx):
    mock_client.get_json.return_value = {"group-name": "g1"}
    mock_client.delete.side_effect = APIResponseError(500, "in use by slice-1")
    handlers.show_details(ctx, "device-group", "g1")

    result = handlers.delete_from_details(ctx, "device-group")

    assert result.success is False
    assert ctx.notifications.last.message == "Failed to delete device group: in use by slice-1"
    assert ctx.current_section == "device-group-details"


# ============================================================================
# Subscriber list controls
# ============================================================================

def test_go_to_page(mock_client, ctx):
    mock_client.get_json.return_value = {
        "items": [{"ueId": "imsi-1"}], "page": 3, "limit": 1, "total": 3, "pages": 3
    }

    result = handlers.go_to_page(ctx, 3)

    assert result.success is True
    assert result.data["meta"] == {"page": 3, "limit": 1, "total": 3, "pages": 3}
    assert result.data["items"] == [{"ueId": "imsi-1"}]


def test_apply_list_controls_error(mock_client, ctx):
    mock_client.get_json.side_effect = APIResponseError(500, "HTTP 500: Internal Server Error")
    result = handlers.apply_list_controls(ctx, q="x")
    assert result.success is False


# ============================================================================
# Admin actions
# ============================================================================

def test_sync_k4_keys_success(mock_client, ctx):
    mock_client.get_text.return_value = _ok("3 keys synchronized")

    result = handlers.sync_k4_keys(ctx)

    assert result.success is True
    assert result.message == "3 keys synchronized"
    mock_client.get_text.assert_called_once_with("http://webui.test/sync-ssm/sync-key")
    assert ctx.notifications.last.message == "K4 keys synchronized successfully!"


def test_check_k4_life_failure(mock_client, ctx):
    mock_client.get_text.return_value = _failed(500, "")

    result = handlers.check_k4_life(ctx)

    assert result.success is False
    assert ctx.notifications.last.message == "Health check failed: Health check failed"


def test_rotate_k4_keys_failure_body(mock_client, ctx):
    mock_client.get_text.return_value = _failed(502, "SSM unreachable")
    handlers.rotate_k4_keys(ctx)
    assert ctx.notifications.last.message == "Rotation failed: SSM unreachable"


def test_unknown_admin_action(ctx):
    with pytest.raises(ValueError):
        handlers.run_admin_action(ctx, "wipe")


@patch('webconsole.core.context.get_client')
def test_context_uses_shared_client(mock_get_client):
    ctx = AppContext()
    assert ctx.client is mock_get_client.return_value
