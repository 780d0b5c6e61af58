# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Console control layer.

REST transport, renderers, notifications and the MCP server for the
5G mobile-core configuration console.
"""

__version__ = "0.1.0"
