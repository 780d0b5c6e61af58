"""Per-entity managers for the config API."""

from .base_manager import BaseManager, NamedCollectionManager
from .device_group import DeviceGroupManager
from .inventory import GnbManager, UpfManager
from .k4 import K4Manager
from .network_slice import NetworkSliceManager
from .subscriber import SubscriberListManager

__all__ = [
    "BaseManager",
    "NamedCollectionManager",
    "DeviceGroupManager",
    "NetworkSliceManager",
    "GnbManager",
    "UpfManager",
    "K4Manager",
    "SubscriberListManager",
]
