# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Console core.

Entity schemas, per-entity managers, the create/edit modal state machine,
the section router and the application context for the 5G configuration
console.
"""

__version__ = "0.1.0"
