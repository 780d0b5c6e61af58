#!/usr/bin/env python3
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Web Console MCP Server

MCP server for administering a 5G mobile core through its configuration
API. Provides tools for device groups, network slices, gNB/UPF inventory,
subscribers, K4 keys and the sync-ssm admin actions.
"""

import json
import logging
import threading
from enum import Enum
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# MCP SDK
from mcp.server.fastmcp import FastMCP

# Local modules
from .constants import DEFAULT_PAGE_LIMIT, SECTIONS, SSM_ACTIONS
from .formatters import (
    format_admin_result_markdown,
    format_details_markdown,
    format_items_json,
    format_result_json,
)
from .http_client import ConsoleClientError

from webconsole.core import handlers
from webconsole.core.abstract import Result
from webconsole.core.context import AppContext, create_context

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize MCP server
mcp = FastMCP("webconsole_mcp")

EntityType = Literal["device-group", "network-slice", "gnb", "upf", "k4-key", "subscriber"]
AdminAction = Literal["sync-key", "check-k4-life", "k4-rotation"]

_context: Optional[AppContext] = None
_context_lock = threading.Lock()


def get_context() -> AppContext:
    """Get or create the shared console context."""
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                _context = create_context()
    return _context


# ============================================================================
# Pydantic Models for Input Validation
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


class BaseInput(BaseModel):
    """Base input model with response format."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable"
    )


class SectionInput(BaseInput):
    """Input model for loading a console section."""

    section: str = Field(
        ...,
        description="Section name (e.g., 'device-groups', 'network-slices', 'gnb-inventory', 'k4-keys')"
    )

    @field_validator('section')
    @classmethod
    def validate_section(cls, v: str) -> str:
        if v not in SECTIONS:
            raise ValueError(f"Unknown section: {v}. Valid sections: {', '.join(SECTIONS)}")
        return v


class ItemInput(BaseInput):
    """Input model addressing a single entity."""

    type: EntityType = Field(..., description="Entity type tag (e.g., 'device-group', 'gnb')")
    item_id: str = Field(
        ...,
        description="Entity identity (group/slice/gNB name, UPF hostname, K4 SNO or UE ID)",
        min_length=1
    )


class FormInput(BaseInput):
    """Input model for describing a create or edit form."""

    type: EntityType = Field(..., description="Entity type tag")
    item_id: Optional[str] = Field(
        default=None,
        description="Identity of the item to edit. Omit for the create form."
    )


class CreateItemInput(BaseInput):
    """Input model for creating an entity from form values."""

    type: EntityType = Field(..., description="Entity type tag")
    form_data: Dict[str, Any] = Field(
        ...,
        description="Form values keyed by field id (see console_get_form)"
    )


class UpdateItemInput(ItemInput):
    """Input model for updating an entity. Unset fields keep their current values."""

    form_data: Dict[str, Any] = Field(
        ...,
        description="Changed form values keyed by field id"
    )


class DeleteItemInput(ItemInput):
    """Input model for deleting an entity."""

    confirm: bool = Field(
        default=False,
        description="Must be true to delete"
    )


class DeleteK4KeyInput(BaseInput):
    """Input model for deleting a K4 key."""

    k4_sno: int = Field(..., description="K4 serial number (0-255)", ge=0, le=255)
    key_label: str = Field(..., description="Key label (e.g., 'K4_AES')", min_length=1)
    confirm: bool = Field(default=False, description="Must be true to delete")


class SubscriberListInput(BaseInput):
    """Input model for the paginated subscriber list."""

    page: int = Field(default=1, description="Page number", ge=1)
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, description="Page size", ge=1, le=500)
    q: str = Field(default="", description="Free-text search")
    ue_id: str = Field(default="", description="Filter by UE ID")
    plmn_id: str = Field(default="", description="Filter by PLMN ID")


class AdminActionInput(BaseInput):
    """Input model for a sync-ssm admin action."""

    action: AdminAction = Field(
        ...,
        description="'sync-key' (sync K4 keys), 'check-k4-life' or 'k4-rotation'"
    )


# ============================================================================
# Helpers
# ============================================================================

def _format_result(result: Result, response_format: ResponseFormat) -> str:
    if response_format == ResponseFormat.JSON:
        return format_result_json(result.success, result.message, result.error, result.data)
    if not result.success:
        return f"Error: {result.error or result.message}"
    return result.message


def _deletion_not_confirmed(params: BaseInput) -> str:
    message = "Deletion not confirmed. Set confirm=true to delete."
    if params.response_format == ResponseFormat.JSON:
        return format_result_json(False, message)
    return f"Error: {message}"


# ============================================================================
# Tool 1: List Section
# ============================================================================

@mcp.tool(
    name="console_list_section",
    annotations={
        "title": "List Console Section",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def console_list_section(params: SectionInput) -> str:
    """
    Load a console section (device groups, network slices, inventory, K4 keys, subscribers).

    Args:
        params (SectionInput): Input parameters containing:
            - section (str): Section name
            - response_format (ResponseFormat): Output format - 'markdown' or 'json'

    Returns:
        str: Rendered section or JSON item list.

    Examples:
        - Use when: "Show me all device groups"
        - Use when: "Which gNBs are in the inventory?"
    """
    try:
        ctx = get_context()
        result = handlers.show_section(ctx, params.section)
        if not result.success:
            return f"Error: {result.error}"

        if params.response_format == ResponseFormat.MARKDOWN:
            return result.message

        items = result.data.get("items") or []
        meta = None
        if SECTIONS[params.section] == "subscriber_list_manager":
            meta = ctx.subscriber_list_manager.list_meta.model_dump()
        return format_items_json(params.section, items, meta)

    except Exception as e:
        logger.error(f"Unexpected error in list_section: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 2: Get Item
# ============================================================================

@mcp.tool(
    name="console_get_item",
    annotations={
        "title": "Get Console Item",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def console_get_item(params: ItemInput) -> str:
    """
    Retrieve one entity document by type and identity.

    Args:
        params (ItemInput): Input parameters containing:
            - type (str): Entity type tag
            - item_id (str): Entity identity
            - response_format (ResponseFormat): Output format

    Returns:
        str: Entity document.

    Examples:
        - Use when: "Show the details of device group iot-cameras"
    """
    try:
        ctx = get_context()
        manager = ctx.modal_manager.get_manager_by_type(params.type)
        document = manager.get_item(params.item_id)

        if params.response_format == ResponseFormat.JSON:
            return json.dumps(document, indent=2)
        return format_details_markdown(f"{manager.display_name}: {params.item_id}", document)

    except ConsoleClientError as e:
        return f"Error: Failed to load {params.type} {params.item_id}: {str(e)}"
    except Exception as e:
        logger.error(f"Unexpected error in get_item: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 3: Get Form
# ============================================================================

@mcp.tool(
    name="console_get_form",
    annotations={
        "title": "Describe Create/Edit Form",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def console_get_form(params: FormInput) -> str:
    """
    Describe the fields (and current values when editing) of an entity form.

    Use the field ids as keys of form_data for console_create_item and
    console_update_item.

    Args:
        params (FormInput): Input parameters containing:
            - type (str): Entity type tag
            - item_id (Optional[str]): Item to edit; omit for the create form
            - response_format (ResponseFormat): Output format

    Returns:
        str: Form description.
    """
    try:
        ctx = get_context()
        modal = ctx.modal_manager
        if params.item_id:
            result = handlers.edit_item(ctx, params.type, params.item_id)
        else:
            result = handlers.show_create_form(ctx, params.type)
        if not result.success:
            modal.hide()
            return f"Error: {result.error}"

        fields = [f.model_dump(exclude_none=True) for f in modal.fields]
        values = dict(modal.values)
        title = modal.title
        modal.hide()

        if params.response_format == ResponseFormat.JSON:
            return json.dumps({"title": title, "fields": fields, "values": values}, indent=2)

        lines = [f"# {title}", ""]
        for field in fields:
            flags = []
            if field.get("required"):
                flags.append("required")
            if field.get("readonly"):
                flags.append("readonly")
            line = f"- **{field['id']}** ({field['type']}): {field['label']}"
            if flags:
                line += f" [{', '.join(flags)}]"
            if field["id"] in values and values[field["id"]] not in (None, ""):
                line += f" = `{values[field['id']]}`"
            lines.append(line)
        return "\n".join(lines)

    except Exception as e:
        logger.error(f"Unexpected error in get_form: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 4: Create Item
# ============================================================================

@mcp.tool(
    name="console_create_item",
    annotations={
        "title": "Create Console Item",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True
    }
)
async def console_create_item(params: CreateItemInput) -> str:
    """
    Create an entity from form values.

    Form values are validated before anything is sent; validation errors
    are returned one per line.

    Args:
        params (CreateItemInput): Input parameters containing:
            - type (str): Entity type tag
            - form_data (dict): Form values keyed by field id
            - response_format (ResponseFormat): Output format

    Returns:
        str: Outcome message.

    Examples:
        - Use when: "Add gNB gnb-3 with TAC 3"
    """
    try:
        ctx = get_context()
        opened = handlers.show_create_form(ctx, params.type)
        if not opened.success:
            return _format_result(opened, params.response_format)

        result = handlers.save_item(ctx, params.form_data)
        ctx.modal_manager.hide()
        return _format_result(result, params.response_format)

    except Exception as e:
        logger.error(f"Unexpected error in create_item: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 5: Update Item
# ============================================================================

@mcp.tool(
    name="console_update_item",
    annotations={
        "title": "Update Console Item",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def console_update_item(params: UpdateItemInput) -> str:
    """
    Update an entity. Fields not in form_data keep their stored values.

    Args:
        params (UpdateItemInput): Input parameters containing:
            - type (str): Entity type tag
            - item_id (str): Entity identity
            - form_data (dict): Changed form values keyed by field id
            - response_format (ResponseFormat): Output format

    Returns:
        str: Outcome message.
    """
    try:
        ctx = get_context()
        opened = handlers.edit_item(ctx, params.type, params.item_id)
        if not opened.success:
            ctx.modal_manager.hide()
            return _format_result(opened, params.response_format)

        form_data = {**ctx.modal_manager.values, **params.form_data}
        result = handlers.save_item(ctx, form_data)
        ctx.modal_manager.hide()
        return _format_result(result, params.response_format)

    except Exception as e:
        logger.error(f"Unexpected error in update_item: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 6: Delete Item
# ============================================================================

@mcp.tool(
    name="console_delete_item",
    annotations={
        "title": "Delete Console Item",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def console_delete_item(params: DeleteItemInput) -> str:
    """
    Delete an entity. Requires confirm=true.

    K4 keys are deleted by serial number; their label is looked up first.

    Args:
        params (DeleteItemInput): Input parameters containing:
            - type (str): Entity type tag
            - item_id (str): Entity identity
            - confirm (bool): Must be true
            - response_format (ResponseFormat): Output format

    Returns:
        str: Outcome message.
    """
    if not params.confirm:
        return _deletion_not_confirmed(params)

    try:
        result = handlers.delete_item(get_context(), params.type, params.item_id)
        return _format_result(result, params.response_format)

    except Exception as e:
        logger.error(f"Unexpected error in delete_item: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 7: Delete K4 Key
# ============================================================================

@mcp.tool(
    name="console_delete_k4_key",
    annotations={
        "title": "Delete K4 Key",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def console_delete_k4_key(params: DeleteK4KeyInput) -> str:
    """
    Delete a K4 key by serial number and key label. Requires confirm=true.

    Args:
        params (DeleteK4KeyInput): Input parameters containing:
            - k4_sno (int): K4 serial number
            - key_label (str): Key label
            - confirm (bool): Must be true
            - response_format (ResponseFormat): Output format

    Returns:
        str: Outcome message.
    """
    if not params.confirm:
        return _deletion_not_confirmed(params)

    try:
        result = handlers.delete_k4_item(get_context(), params.k4_sno, params.key_label)
        return _format_result(result, params.response_format)

    except Exception as e:
        logger.error(f"Unexpected error in delete_k4_key: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 8: List Subscribers
# ============================================================================

@mcp.tool(
    name="console_list_subscribers",
    annotations={
        "title": "List Subscribers",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def console_list_subscribers(params: SubscriberListInput) -> str:
    """
    List provisioned subscribers with search filters and pagination.

    Args:
        params (SubscriberListInput): Input parameters containing:
            - page (int): Page number
            - limit (int): Page size
            - q, ue_id, plmn_id (str): Optional filters
            - response_format (ResponseFormat): Output format

    Returns:
        str: Subscriber page.

    Examples:
        - Use when: "Show the second page of subscribers"
        - Use when: "Find subscriber imsi-208930100007487"
    """
    try:
        ctx = get_context()
        manager = ctx.subscriber_list_manager
        manager.set_list_state(
            q=params.q,
            ueId=params.ue_id,
            plmnID=params.plmn_id,
            limit=params.limit
        )
        result = handlers.go_to_page(ctx, params.page)
        if not result.success:
            return f"Error: {result.error}"

        if params.response_format == ResponseFormat.JSON:
            return format_items_json("subscriber", result.data["items"], result.data["meta"])
        return result.message

    except Exception as e:
        logger.error(f"Unexpected error in list_subscribers: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Tool 9: Admin Action
# ============================================================================

@mcp.tool(
    name="console_run_admin_action",
    annotations={
        "title": "Run sync-ssm Admin Action",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True
    }
)
async def console_run_admin_action(params: AdminActionInput) -> str:
    """
    Run a key-management admin action on the config service.

    Args:
        params (AdminActionInput): Input parameters containing:
            - action (str): 'sync-key', 'check-k4-life' or 'k4-rotation'
            - response_format (ResponseFormat): Output format

    Returns:
        str: Action output as reported by the service.

    Examples:
        - Use when: "Synchronize the K4 keys"
        - Use when: "Rotate the K4 keys"
    """
    try:
        result = handlers.run_admin_action(get_context(), params.action)
        if params.response_format == ResponseFormat.JSON:
            return json.dumps(result.model_dump(), indent=2)
        return format_admin_result_markdown(SSM_ACTIONS[params.action], result.success, result.message)

    except Exception as e:
        logger.error(f"Unexpected error in run_admin_action: {e}")
        return f"Error: Unexpected error occurred: {str(e)}"


# ============================================================================
# Main Entry Point
# ============================================================================

def main():
    """Main entry point for the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
