# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Constants and configuration for the console control layer.

Defines the config API endpoints, validation patterns, default values
and the section routing table shared by the managers and the servers.
"""

import os

# Backend base URLs
CONFIG_API_URL = os.getenv("CONFIG_API_URL", "http://localhost:5000")
SUBSCRIBER_API_URL = os.getenv("SUBSCRIBER_API_URL", CONFIG_API_URL)
SSM_API_URL = os.getenv("SSM_API_URL", CONFIG_API_URL)

# API path prefixes
API_BASE = "/config/v1"
SUBSCRIBER_API_BASE = "/api"
SSM_API_BASE = "/sync-ssm"

# Entity endpoints (relative to their API base)
DEVICE_GROUP_ENDPOINT = "/device-group"
NETWORK_SLICE_ENDPOINT = "/network-slice"
GNB_ENDPOINT = "/inventory/gnb"
UPF_ENDPOINT = "/inventory/upf"
K4_ENDPOINT = "/k4opt"
SUBSCRIBER_ENDPOINT = "/subscriber"

# sync-ssm admin actions (plain-text responses)
SSM_ACTIONS = {
    "sync-key": "Sync K4 Keys",
    "check-k4-life": "Check K4 Life",
    "k4-rotation": "K4 Rotation",
}

# action -> (success notification, failure label)
SSM_ACTION_NOTICES = {
    "sync-key": ("K4 keys synchronized successfully!", "Sync"),
    "check-k4-life": ("K4 life check completed successfully!", "Health check"),
    "k4-rotation": ("K4 rotation executed successfully!", "Rotation"),
}

# Request handling
REQUEST_TIMEOUT = int(os.getenv("CONSOLE_REQUEST_TIMEOUT", "30"))  # seconds
DETAIL_FETCH_WORKERS = int(os.getenv("CONSOLE_DETAIL_FETCH_WORKERS", "4"))

# Validation patterns
IMSI_PATTERN = r"^[0-9]{15}$"
CIDR_PATTERN = r"^([0-9]{1,3}\.){3}[0-9]{1,3}/[0-9]{1,2}$"
IPV4_PATTERN = r"^([0-9]{1,3}\.){3}[0-9]{1,3}$"
HEX_PATTERN = r"^[0-9a-fA-F]+$"
SD_PATTERN = r"^[0-9A-Fa-f]{6}$"
MCC_PATTERN = r"^[0-9]{3}$"
MNC_PATTERN = r"^[0-9]{2,3}$"
PLMN_ID_PATTERN = r"^[0-9]{5,6}$"

# Numeric ranges
MTU_MIN = 1200
MTU_MAX = 9000
TAC_MIN = 1
TAC_MAX = 16777215
K4_SNO_MIN = 0
K4_SNO_MAX = 255

# K4 key enums
K4_KEY_LABELS = ("K4_AES", "K4_DES", "K4_DES3")
K4_KEY_TYPES = ("AES", "DES", "DES3")

# Application filtering rule defaults
DEFAULT_RULE_PRIORITY = 0
DEFAULT_RULE_PROTOCOL = 0
DEFAULT_DEST_PORT_START = 0
DEFAULT_DEST_PORT_END = 65535
DEFAULT_RULE_BITRATE_UNIT = "bps"
DEFAULT_TRAFFIC_CLASS = {
    "name": "default",
    "qci": 9,
    "arp": 8,
    "pdb": 100,
    "pelr": 6,
}

# Device group form defaults
DEFAULT_BITRATE_UNIT = "Mbps"
BITRATE_UNITS = ("bps", "Kbps", "Mbps", "Gbps")

# Subscriber list paging
DEFAULT_PAGE_LIMIT = 20
PAGE_LIMIT_CHOICES = (10, 20, 50, 100)

# Type tag -> manager key (create/edit modal routing)
TYPE_MAPPING = {
    "device-group": "device_groups",
    "network-slice": "network_slices",
    "gnb": "gnb_inventory",
    "upf": "upf_inventory",
    "k4-key": "k4_manager",
    "subscriber": "subscriber_list_manager",
}

# Section name -> manager key (navigation)
SECTIONS = {
    "device-groups": "device_groups",
    "device-group-details": "device_groups",
    "network-slices": "network_slices",
    "network-slice-details": "network_slices",
    "gnb-inventory": "gnb_inventory",
    "gnb-details": "gnb_inventory",
    "upf-inventory": "upf_inventory",
    "subscribers": "k4_manager",
    "k4-keys": "k4_manager",
    "k4-details": "k4_manager",
    "subscribers-list": "subscriber_list_manager",
    "subscriber-details": "subscriber_list_manager",
}

DETAIL_SECTIONS = frozenset(s for s in SECTIONS if s.endswith("-details"))
DEFAULT_SECTION = "device-groups"

# MCP Response Limits
CHARACTER_LIMIT = 25000  # Maximum response size in characters
