# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Response formatters for the console.

Functions to render entity lists and details in Markdown (human-readable)
and JSON (machine-readable), plus the loading/error/empty view states
used by the managers.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .constants import CHARACTER_LIMIT


NOT_AVAILABLE = "N/A"


def format_timestamp() -> str:
    """
    Generate human-readable timestamp.

    Returns:
        Formatted timestamp (e.g., "2024-01-15 10:30:00 UTC")
    """
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def truncate_if_needed(content: str, item_count: Optional[int] = None) -> str:
    """
    Truncate response if it exceeds CHARACTER_LIMIT.

    Args:
        content: Response content to check/truncate
        item_count: Optional count of items in response for helpful message

    Returns:
        Original or truncated content with truncation notice
    """
    if len(content) <= CHARACTER_LIMIT:
        return content

    truncated = content[:CHARACTER_LIMIT]

    notice = f"\n\n[TRUNCATED - Response exceeded {CHARACTER_LIMIT} characters"
    if item_count:
        notice += ". Showing partial results. Use filtering or pagination to see more]"
    else:
        notice += ". Use filtering to reduce result size]"

    return truncated + notice


# ============================================================================
# View States
# ============================================================================

def format_loading(message: str = "Loading...") -> str:
    return f"*{message}*"


def format_error(message: Optional[str]) -> str:
    text = str(message) if message else "An unknown error occurred"
    return f"**Error:** {text}"


def format_empty(message: str) -> str:
    return f"*{message}*"


# ============================================================================
# Helpers
# ============================================================================

def _cell(value: Any) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value).replace("|", "\\|")


def format_table(headers: Sequence[str], rows: List[Sequence[Any]]) -> str:
    """Render a Markdown table."""
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(c) for c in row) + " |")
    return "\n".join(lines)


def _preview(values: List[str], limit: int = 3) -> str:
    shown = ", ".join(values[:limit])
    return shown + ("..." if len(values) > limit else "")


def _header(title: str, total: int) -> List[str]:
    return [
        f"# {title}",
        f"**Timestamp:** {format_timestamp()}",
        f"**Total:** {total}",
        "",
    ]


# ============================================================================
# Entity Lists
# ============================================================================

def format_device_group_list_markdown(groups: List[Dict[str, Any]]) -> str:
    """
    Format device groups as Markdown.

    Args:
        groups: Device group documents (wire field names)

    Returns:
        Markdown formatted string
    """
    lines = _header("Device Groups", len(groups))
    rows = []
    for group in groups:
        imsis = group.get("imsis") or []
        imsi_cell = f"{len(imsis)} IMSIs"
        if imsis:
            imsi_cell += f" ({_preview(imsis)})"
        rows.append([
            group.get("group-name"),
            imsi_cell,
            group.get("site-info"),
            group.get("ip-domain-name"),
        ])
    lines.append(format_table(["Group Name", "IMSIs", "Site Info", "IP Domain"], rows))
    return truncate_if_needed("\n".join(lines), len(groups))


def format_network_slice_list_markdown(slices: List[Dict[str, Any]]) -> str:
    """Format network slices as Markdown."""
    lines = _header("Network Slices", len(slices))
    rows = []
    for network_slice in slices:
        slice_id = network_slice.get("slice-id") or {}
        site_info = network_slice.get("site-info") or {}
        device_groups = network_slice.get("site-device-group") or []
        gnodebs = site_info.get("gNodeBs") or []
        rules = network_slice.get("application-filtering-rules") or []
        groups_cell = f"{len(device_groups)} groups"
        if device_groups:
            groups_cell += f" ({', '.join(device_groups)})"
        rows.append([
            network_slice.get("slice-name"),
            slice_id.get("sst"),
            slice_id.get("sd"),
            site_info.get("site-name"),
            groups_cell,
            f"{len(gnodebs)} gNodeBs, {len(rules)} rules",
        ])
    lines.append(format_table(
        ["Slice Name", "SST", "SD", "Site", "Device Groups", "Topology"], rows
    ))
    return truncate_if_needed("\n".join(lines), len(slices))


def format_gnb_list_markdown(gnbs: List[Dict[str, Any]]) -> str:
    lines = _header("gNB Inventory", len(gnbs))
    rows = [[g.get("name"), g.get("tac")] for g in gnbs]
    lines.append(format_table(["Name", "TAC"], rows))
    return truncate_if_needed("\n".join(lines), len(gnbs))


def format_upf_list_markdown(upfs: List[Dict[str, Any]]) -> str:
    lines = _header("UPF Inventory", len(upfs))
    rows = [[u.get("hostname"), u.get("port")] for u in upfs]
    lines.append(format_table(["Hostname", "Port"], rows))
    return truncate_if_needed("\n".join(lines), len(upfs))


def format_k4_list_markdown(keys: List[Dict[str, Any]]) -> str:
    """Format K4 keys as Markdown. Keys with an empty value show 'N/S'."""
    lines = _header("K4 Keys", len(keys))
    rows = []
    for key in keys:
        k4 = key.get("k4")
        rows.append([
            key.get("k4_sno"),
            key.get("key_label"),
            key.get("key_type"),
            f"`{k4}`" if k4 and k4.strip() else "N/S",
        ])
    lines.append(format_table(["Serial Number (SNO)", "Key Label", "Key Type", "K4 Key"], rows))
    return truncate_if_needed("\n".join(lines), len(keys))


def format_subscriber_list_markdown(
    subscribers: List[Dict[str, Any]],
    meta: Optional[Dict[str, int]] = None
) -> str:
    """
    Format subscriber list as Markdown.

    Args:
        subscribers: Subscriber list entries (ueId, plmnID)
        meta: Optional pagination metadata (page, limit, total, pages)

    Returns:
        Markdown formatted string
    """
    meta = meta or {}
    total = meta.get("total", len(subscribers))
    lines = _header("Subscribers", total)
    pages = meta.get("pages")
    if pages:
        lines.insert(-1, f"**Page:** {meta.get('page', 1)} of {pages}")

    if not subscribers:
        lines.append(format_empty("No subscribers found"))
        return "\n".join(lines)

    rows = [[s.get("ueId"), s.get("plmnID")] for s in subscribers]
    lines.append(format_table(["UE ID (IMSI)", "PLMN ID"], rows))
    return truncate_if_needed("\n".join(lines), len(subscribers))


# ============================================================================
# Details
# ============================================================================

def _format_value(value: Any, indent: int) -> List[str]:
    pad = "  " * indent
    lines = []
    if isinstance(value, dict):
        for key, item in value.items():
            if isinstance(item, (dict, list)) and item:
                lines.append(f"{pad}- **{key}:**")
                lines.extend(_format_value(item, indent + 1))
            else:
                lines.append(f"{pad}- **{key}:** {_cell(item) if not isinstance(item, (dict, list)) else 'none'}")
    elif isinstance(value, list):
        for index, item in enumerate(value, start=1):
            if isinstance(item, (dict, list)):
                lines.append(f"{pad}- #{index}")
                lines.extend(_format_value(item, indent + 1))
            else:
                lines.append(f"{pad}- {_cell(item)}")
    else:
        lines.append(f"{pad}- {_cell(value)}")
    return lines


def format_details_markdown(title: str, document: Dict[str, Any]) -> str:
    """Render a single entity document as nested Markdown bullets."""
    lines = [f"# {title}", f"**Timestamp:** {format_timestamp()}", ""]
    lines.extend(_format_value(document, 0))
    return truncate_if_needed("\n".join(lines))


# ============================================================================
# JSON
# ============================================================================

def format_items_json(
    kind: str,
    items: List[Dict[str, Any]],
    meta: Optional[Dict[str, Any]] = None
) -> str:
    """
    Format an entity list as JSON.

    Args:
        kind: Entity kind (e.g., "device-group")
        items: Entity documents
        meta: Optional pagination metadata

    Returns:
        JSON formatted string
    """
    response: Dict[str, Any] = {
        "kind": kind,
        "timestamp": format_timestamp(),
        "total": len(items),
        "items": items,
    }
    if meta:
        response["meta"] = meta

    json_str = json.dumps(response, indent=2)
    return truncate_if_needed(json_str, len(items))


def format_result_json(
    success: bool,
    message: str = "",
    error: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None
) -> str:
    """Format an action result as JSON."""
    response: Dict[str, Any] = {
        "success": success,
        "timestamp": format_timestamp(),
        "message": message,
    }
    if error:
        response["error"] = error
    if data is not None:
        response["data"] = data
    return json.dumps(response, indent=2)


def format_admin_result_markdown(title: str, success: bool, message: str) -> str:
    status = "Success" if success else "Error"
    return "\n".join([
        f"## {title} - {status}",
        "",
        message or "*No output*",
    ])
