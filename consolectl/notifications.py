# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""User-facing notifications raised by console actions."""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Literal, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

NotificationLevel = Literal["success", "danger", "warning", "info"]

_LOG_LEVELS = {
    "success": logging.INFO,
    "danger": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
}


class Notification(BaseModel):
    """A single toast-style notification"""

    level: NotificationLevel
    message: str
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    )


class NotificationManager:
    """Records notifications so a front-end can display them."""

    def __init__(self, max_history: int = 100):
        self._history: Deque[Notification] = deque(maxlen=max_history)

    def show_success(self, message: str) -> Notification:
        return self.show_notification(message, "success")

    def show_error(self, message: str) -> Notification:
        return self.show_notification(message, "danger")

    def show_warning(self, message: str) -> Notification:
        return self.show_notification(message, "warning")

    def show_info(self, message: str) -> Notification:
        return self.show_notification(message, "info")

    def show_notification(self, message: str, level: str) -> Notification:
        if level == "error":
            level = "danger"
        if level not in _LOG_LEVELS:
            level = "info"
        notification = Notification(level=level, message=message)
        self._history.append(notification)
        logger.log(_LOG_LEVELS[level], f"[{level}] {message}")
        return notification

    def show_api_error(
        self,
        error: Union[Exception, str],
        operation: str = "operation"
    ) -> Notification:
        """Notify an API failure as 'Failed to {operation}: {message}'."""
        message = f"Failed to {operation}"
        detail = str(error)
        if detail:
            message += f": {detail}"
        return self.show_error(message)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    @property
    def last(self) -> Notification:
        return self._history[-1]

    def drain(self) -> List[Notification]:
        """Return and clear pending notifications."""
        items = list(self._history)
        self._history.clear()
        return items
