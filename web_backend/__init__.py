# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Web backend for the 5G web console.

FastAPI-based REST API that exposes the console actions (section
listing, forms, create/update/delete, K4 keys, sync-ssm admin actions)
through HTTP endpoints for a thin browser front-end.
"""

__version__ = "0.1.0"
