# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
sync-ssm admin client.

Triggers the key-management admin actions exposed by the config service
(K4 key sync, K4 life check, K4 rotation). The endpoints answer with
plain text that is shown to the operator as-is.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from .constants import SSM_API_BASE, SSM_ACTIONS, SSM_ACTION_NOTICES
from .http_client import ConfigAPIClient, ConsoleClientError, get_client

logger = logging.getLogger(__name__)


class AdminActionResult(BaseModel):
    """Outcome of a sync-ssm admin action"""

    action: str
    title: str
    success: bool
    message: str


class SSMAdminClient:
    """Client for the /sync-ssm admin endpoints."""

    def __init__(self, client: Optional[ConfigAPIClient] = None):
        self._client = client

    @property
    def client(self) -> ConfigAPIClient:
        if self._client is None:
            self._client = get_client()
        return self._client

    def run(self, action: str) -> AdminActionResult:
        """
        Execute an admin action.

        Args:
            action: One of "sync-key", "check-k4-life", "k4-rotation".

        Returns:
            AdminActionResult with the plain-text body as message.

        Raises:
            ValueError: If the action is unknown.
        """
        if action not in SSM_ACTIONS:
            raise ValueError(f"Unknown admin action: {action}")

        title = SSM_ACTIONS[action]
        url = self.client.url(SSM_API_BASE, f"/{action}")
        try:
            response = self.client.get_text(url)
        except ConsoleClientError as e:
            logger.error(f"{title} failed: {e}")
            return AdminActionResult(action=action, title=title, success=False, message=str(e))

        body = response.text
        if response.ok:
            logger.info(f"{title} succeeded")
            return AdminActionResult(action=action, title=title, success=True, message=body)

        logger.error(f"{title} failed with HTTP {response.status_code}")
        return AdminActionResult(
            action=action,
            title=title,
            success=False,
            message=body or f"{SSM_ACTION_NOTICES[action][1]} failed"
        )

    def sync_k4_keys(self) -> AdminActionResult:
        return self.run("sync-key")

    def check_k4_life(self) -> AdminActionResult:
        return self.run("check-k4-life")

    def rotate_k4_keys(self) -> AdminActionResult:
        return self.run("k4-rotation")
