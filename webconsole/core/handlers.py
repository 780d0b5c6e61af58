# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Console actions.

Each handler takes the AppContext first and reports its outcome as a
Result and through the context's notifications. The MCP tools and the
HTTP routes call these functions.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from consolectl.constants import SSM_ACTION_NOTICES
from consolectl.http_client import ConsoleClientError
from consolectl.ssm_client import AdminActionResult

from webconsole.core.abstract import Result
from webconsole.core.context import AppContext
from webconsole.core.managers import BaseManager

logger = logging.getLogger(__name__)


# ============================================================================
# Navigation
# ============================================================================

def show_section(ctx: AppContext, section: str) -> Result:
    try:
        items = ctx.ui_manager.show_section(section)
    except ValueError as e:
        ctx.notifications.show_error(str(e))
        return Result(success=False, error=str(e))

    manager = ctx.ui_manager.get_section_manager(section)
    if manager is not None and manager.error:
        return Result(success=False, error=manager.error, data={"section": section})

    data: Dict[str, Any] = {"section": section}
    if items is not None:
        data["items"] = items
    return Result(success=True, message=ctx.ui_manager.view(section), data=data)


# ============================================================================
# Create/edit modal
# ============================================================================

def show_create_form(ctx: AppContext, type: str) -> Result:
    return ctx.modal_manager.show_create_form(type)


def edit_item(ctx: AppContext, type: str, name: Any) -> Result:
    return ctx.modal_manager.edit_item(type, name)


def delete_item(ctx: AppContext, type: str, name: Any) -> Result:
    return ctx.modal_manager.delete_item(type, name)


def save_item(ctx: AppContext, form_data: Dict[str, Any]) -> Result:
    return ctx.modal_manager.save_item(form_data)


def hide_modal(ctx: AppContext) -> Result:
    ctx.modal_manager.hide()
    return Result(success=True)


def delete_k4_item(ctx: AppContext, k4_sno: Any, key_label: str) -> Result:
    """Delete a K4 key by (sno, label) from the K4 list."""
    prompt = f"Are you sure you want to delete K4 key with SNO {k4_sno} and label {key_label}?"
    if not ctx.confirm(prompt):
        return Result(success=False, message="Deletion cancelled")

    manager = ctx.k4_manager
    try:
        manager.delete_item(k4_sno, key_label)
    except ConsoleClientError as e:
        logger.error(f"Failed to delete K4 key {k4_sno}/{key_label}: {e}")
        notification = ctx.notifications.show_api_error(e, "delete K4 key")
        return Result(success=False, error=notification.message)

    message = "K4 key deleted successfully!"
    ctx.notifications.show_success(message)
    manager.load_data()
    return Result(success=True, message=message)


# ============================================================================
# Details view
# ============================================================================

def _details_manager(ctx: AppContext, type: str) -> Tuple[Optional[BaseManager], Optional[Result]]:
    manager = ctx.modal_manager.get_manager_by_type(type)
    if manager is None:
        message = f"Unknown type: {type}"
    elif not manager.details_section:
        message = f"Details are not available for {manager.display_name}"
    else:
        return manager, None
    ctx.notifications.show_error(message)
    return None, Result(success=False, error=message)


def show_details(ctx: AppContext, type: str, item_id: Any) -> Result:
    manager, failure = _details_manager(ctx, type)
    if failure:
        return failure

    try:
        data = manager.show_details(item_id)
    except ConsoleClientError as e:
        logger.error(f"Error loading {type} details for {item_id}: {e}")
        message = f"Error loading {manager.display_name.lower()} details"
        ctx.notifications.show_error(message)
        return Result(success=False, message=message, error=str(e))

    ctx.ui_manager.show_section(manager.details_section)
    return Result(success=True, message=manager.details_view, data=data)


def toggle_edit_mode(ctx: AppContext, type: str, enable: Optional[bool] = None) -> Result:
    manager, failure = _details_manager(ctx, type)
    if failure:
        return failure
    edit_mode = manager.toggle_edit_mode(enable)
    values = manager.to_form_values(manager.current_data) if edit_mode and manager.current_data else {}
    return Result(success=True, data={"edit_mode": edit_mode, "values": values})


def cancel_edit(ctx: AppContext, type: str) -> Result:
    return toggle_edit_mode(ctx, type, False)


def save_details_edit(ctx: AppContext, type: str, form_data: Dict[str, Any]) -> Result:
    manager, failure = _details_manager(ctx, type)
    if failure:
        return failure

    result = manager.save_details_edit(form_data)
    if result.success:
        ctx.notifications.show_success(result.message)
    else:
        _notify_failure(ctx, result)
    return result


def _notify_failure(ctx: AppContext, result: Result) -> None:
    if result.message:
        ctx.notifications.show_error(f"{result.message}: {result.error}")
    else:
        ctx.notifications.show_error(result.error or "An unknown error occurred")


def delete_from_details(ctx: AppContext, type: str) -> Result:
    """Confirm, delete the item in the details view, then go back to its list."""
    manager, failure = _details_manager(ctx, type)
    if failure:
        return failure

    prompt = (
        f'Are you sure you want to delete the {manager.display_name.lower()} '
        f'"{manager.current_name}"? This action cannot be undone.'
    )
    if not ctx.confirm(prompt):
        return Result(success=False, message="Deletion cancelled")

    result = manager.delete_from_details()
    if not result.success:
        _notify_failure(ctx, result)
        return result

    ctx.notifications.show_success(result.message)
    if manager.list_section:
        ctx.ui_manager.show_section(manager.list_section)
    return result


# ============================================================================
# Subscriber list controls
# ============================================================================

def _subscriber_list(ctx: AppContext) -> Result:
    manager = ctx.subscriber_list_manager
    if manager.error:
        return Result(success=False, error=manager.error)
    return Result(
        success=True,
        message=manager.view,
        data={"items": manager.data, "meta": manager.list_meta.model_dump()}
    )


def go_to_page(ctx: AppContext, page: Any) -> Result:
    ctx.subscriber_list_manager.go_to_page(page)
    return _subscriber_list(ctx)


def next_page(ctx: AppContext) -> Result:
    ctx.subscriber_list_manager.next_page()
    return _subscriber_list(ctx)


def previous_page(ctx: AppContext) -> Result:
    ctx.subscriber_list_manager.previous_page()
    return _subscriber_list(ctx)


def apply_list_controls(
    ctx: AppContext,
    q: str = "",
    ue_id: str = "",
    plmn_id: str = "",
    limit: Any = None
) -> Result:
    ctx.subscriber_list_manager.apply_list_controls(q=q, ue_id=ue_id, plmn_id=plmn_id, limit=limit)
    return _subscriber_list(ctx)


def clear_list_controls(ctx: AppContext) -> Result:
    ctx.subscriber_list_manager.clear_list_controls()
    return _subscriber_list(ctx)


# ============================================================================
# sync-ssm admin actions
# ============================================================================

def run_admin_action(ctx: AppContext, action: str) -> AdminActionResult:
    """
    Run a sync-ssm action and notify its outcome.

    Raises:
        ValueError: If the action is unknown.
    """
    result = ctx.ssm.run(action)
    success_message, failure_label = SSM_ACTION_NOTICES[action]
    if result.success:
        ctx.notifications.show_success(success_message)
    else:
        ctx.notifications.show_error(f"{failure_label} failed: {result.message}")
    return result


def sync_k4_keys(ctx: AppContext) -> AdminActionResult:
    return run_admin_action(ctx, "sync-key")


def check_k4_life(ctx: AppContext) -> AdminActionResult:
    return run_admin_action(ctx, "check-k4-life")


def rotate_k4_keys(ctx: AppContext) -> AdminActionResult:
    return run_admin_action(ctx, "k4-rotation")
