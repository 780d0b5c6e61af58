# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Application context.

One AppContext holds the REST client and one instance of every entity
manager, plus the managers behind the UI. Handlers receive
it as their first argument.
"""

import logging
from typing import Callable, Dict, Optional

from consolectl.constants import API_BASE, DEFAULT_SECTION, DETAIL_FETCH_WORKERS
from consolectl.http_client import ConfigAPIClient, get_client
from consolectl.notifications import NotificationManager
from consolectl.ssm_client import SSMAdminClient

from webconsole.core.managers import (
    BaseManager,
    DeviceGroupManager,
    GnbManager,
    K4Manager,
    NetworkSliceManager,
    SubscriberListManager,
    UpfManager,
)
from webconsole.core.modal_manager import ModalManager
from webconsole.core.ui_manager import UIManager

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


def _always_confirm(message: str) -> bool:
    return True


class AppContext:
    """Explicit replacement for a global application object."""

    def __init__(
        self,
        client: Optional[ConfigAPIClient] = None,
        notifications: Optional[NotificationManager] = None,
        confirm: Optional[ConfirmCallback] = None,
        max_workers: int = DETAIL_FETCH_WORKERS
    ):
        """
        Build the context and its managers.

        Args:
            client: Config API client. Uses the singleton if not provided.
            notifications: Notification sink. A fresh one if not provided.
            confirm: Called with the prompt before deletes; returning False
                cancels. Defaults to always confirming.
            max_workers: Bound for concurrent detail fetches.
        """
        self.client = client or get_client()
        self.notifications = notifications or NotificationManager()
        self.confirm: ConfirmCallback = confirm or _always_confirm
        self.current_section = DEFAULT_SECTION

        self.managers: Dict[str, BaseManager] = {
            "device_groups": DeviceGroupManager(self.client, max_workers=max_workers),
            "network_slices": NetworkSliceManager(self.client, max_workers=max_workers),
            "gnb_inventory": GnbManager(self.client),
            "upf_inventory": UpfManager(self.client),
            "k4_manager": K4Manager(self.client),
            "subscriber_list_manager": SubscriberListManager(self.client),
        }
        self.ssm = SSMAdminClient(self.client)
        self.ui_manager = UIManager(self)
        self.modal_manager = ModalManager(self)

    @property
    def device_groups(self) -> DeviceGroupManager:
        return self.managers["device_groups"]

    @property
    def network_slices(self) -> NetworkSliceManager:
        return self.managers["network_slices"]

    @property
    def k4_manager(self) -> K4Manager:
        return self.managers["k4_manager"]

    @property
    def subscriber_list_manager(self) -> SubscriberListManager:
        return self.managers["subscriber_list_manager"]

    def get_manager(self, key: str) -> BaseManager:
        try:
            return self.managers[key]
        except KeyError:
            raise ValueError(f"Unknown manager: {key}")


def create_context(
    client: Optional[ConfigAPIClient] = None,
    confirm: Optional[ConfirmCallback] = None,
    max_workers: int = DETAIL_FETCH_WORKERS
) -> AppContext:
    """Create an AppContext and report its backend."""
    ctx = AppContext(client=client, confirm=confirm, max_workers=max_workers)
    logger.info(f"Console context ready (config API: {ctx.client.url(API_BASE)})")
    return ctx
