# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""Device group manager"""

import logging
import re
from typing import Any, Dict, List

from consolectl.constants import (
    BITRATE_UNITS,
    CIDR_PATTERN,
    DEFAULT_BITRATE_UNIT,
    DEVICE_GROUP_ENDPOINT,
    IMSI_PATTERN,
    IPV4_PATTERN,
    MTU_MAX,
    MTU_MIN,
)
from consolectl.formatters import format_device_group_list_markdown

from webconsole.core.abstract import FormField, ValidationResult
from webconsole.core.managers.base_manager import NamedCollectionManager, form_int, form_text
from webconsole.models.schema import DeviceGroup

logger = logging.getLogger(__name__)

_TRAFFIC_CLASS_INTS = ("qci", "arp", "pdb", "pelr")


def split_imsis(value: Any) -> List[str]:
    """Split a newline-delimited IMSI textarea into trimmed, non-empty entries."""
    if isinstance(value, (list, tuple)):
        lines = [str(v) for v in value]
    elif value is None:
        return []
    else:
        lines = str(value).split("\n")
    return [line.strip() for line in lines if line.strip()]


class DeviceGroupManager(NamedCollectionManager):
    """Manages /config/v1/device-group"""

    type = "device-group"
    display_name = "Device Group"
    api_endpoint = DEVICE_GROUP_ENDPOINT
    schema = DeviceGroup

    identity_field = "group-name"
    create_uses_identity = True
    range_checked_fields = ("mtu",)

    list_section = "device-groups"
    details_section = "device-group-details"
    empty_message = "No device groups found"
    load_error_prefix = "Failed to load device groups"

    def render(self, data: List[Dict[str, Any]]) -> str:
        if not data:
            return self.show_empty(self.empty_message)
        return format_device_group_list_markdown(data)

    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        return [
            FormField(id="group_name", label="Group Name", required=True, readonly=is_edit,
                      placeholder="e.g., device-group-1"),
            FormField(id="imsis", label="IMSIs", type="textarea",
                      placeholder="Enter IMSIs, one per line",
                      help="Each IMSI must be exactly 15 digits"),
            FormField(id="site_info", label="Site Info", placeholder="e.g., site-1"),
            FormField(id="ip_domain_name", label="IP Domain Name", placeholder="e.g., pool1"),
            FormField(id="dnn", label="DNN (Data Network Name)", placeholder="e.g., internet"),
            FormField(id="ue_ip_pool", label="UE IP Pool", placeholder="e.g., 172.250.0.0/16"),
            FormField(id="mtu", label="MTU", type="number", placeholder="e.g., 1460",
                      min=MTU_MIN, max=MTU_MAX),
            FormField(id="dns_primary", label="Primary DNS", placeholder="e.g., 8.8.8.8"),
            FormField(id="dns_secondary", label="Secondary DNS", placeholder="e.g., 8.8.4.4"),
            FormField(id="dnn_mbr_uplink", label="Uplink MBR", type="number",
                      placeholder="e.g., 100", min=0),
            FormField(id="dnn_mbr_downlink", label="Downlink MBR", type="number",
                      placeholder="e.g., 200", min=0),
            FormField(id="bitrate_unit", label="Bitrate Unit", type="select",
                      options=[(unit, unit) for unit in BITRATE_UNITS],
                      default=DEFAULT_BITRATE_UNIT),
            FormField(id="traffic_class_name", label="Traffic Class Name", placeholder="e.g., default"),
            FormField(id="traffic_class_qci", label="QCI/5QI/QFI", type="number",
                      placeholder="e.g., 9", min=0),
            FormField(id="traffic_class_arp", label="ARP (Priority)", type="number",
                      placeholder="e.g., 1", min=0),
            FormField(id="traffic_class_pdb", label="PDB (ms)", type="number",
                      placeholder="e.g., 300", min=0),
            FormField(id="traffic_class_pelr", label="PELR (%)", type="number",
                      placeholder="e.g., 1", min=0, max=100),
        ]

    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        errors = []

        if not form_text(data, "group_name"):
            errors.append("Group name is required")

        for imsi in split_imsis(data.get("imsis")):
            if not re.match(IMSI_PATTERN, imsi):
                errors.append(f"Invalid IMSI format: {imsi}. IMSIs must be exactly 15 digits")
                break

        ue_ip_pool = form_text(data, "ue_ip_pool")
        if ue_ip_pool and not re.match(CIDR_PATTERN, ue_ip_pool):
            errors.append("UE IP Pool must be in CIDR format (e.g., 172.250.0.0/16)")

        dns_primary = form_text(data, "dns_primary")
        if dns_primary and not re.match(IPV4_PATTERN, dns_primary):
            errors.append("Primary DNS must be a valid IP address")

        dns_secondary = form_text(data, "dns_secondary")
        if dns_secondary and not re.match(IPV4_PATTERN, dns_secondary):
            errors.append("Secondary DNS must be a valid IP address")

        if form_text(data, "mtu"):
            mtu = form_int(data.get("mtu"))
            if mtu is None or mtu < MTU_MIN or mtu > MTU_MAX:
                errors.append(f"MTU must be a number between {MTU_MIN} and {MTU_MAX}")

        return ValidationResult.from_errors(errors)

    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        ip_domain_expanded: Dict[str, Any] = {}
        for field, key in (
            ("dnn", "dnn"),
            ("ue_ip_pool", "ue-ip-pool"),
            ("dns_primary", "dns-primary"),
            ("dns_secondary", "dns-secondary"),
        ):
            value = form_text(form_data, field)
            if value:
                ip_domain_expanded[key] = value
        mtu = form_int(form_data.get("mtu"))
        if mtu:
            ip_domain_expanded["mtu"] = mtu

        ue_dnn_qos: Dict[str, Any] = {}
        uplink = form_int(form_data.get("dnn_mbr_uplink"))
        if uplink:
            ue_dnn_qos["dnn-mbr-uplink"] = uplink
        downlink = form_int(form_data.get("dnn_mbr_downlink"))
        if downlink:
            ue_dnn_qos["dnn-mbr-downlink"] = downlink
        if form_text(form_data, "bitrate_unit"):
            ue_dnn_qos["bitrate-unit"] = form_data["bitrate_unit"]

        traffic_class: Dict[str, Any] = {}
        if form_text(form_data, "traffic_class_name"):
            traffic_class["name"] = form_data["traffic_class_name"]
        for key in _TRAFFIC_CLASS_INTS:
            value = form_int(form_data.get(f"traffic_class_{key}"))
            if value:
                traffic_class[key] = value

        if traffic_class:
            ue_dnn_qos["traffic-class"] = traffic_class
        if ue_dnn_qos:
            ip_domain_expanded["ue-dnn-qos"] = ue_dnn_qos

        return {
            "group-name": form_text(form_data, "group_name"),
            "imsis": split_imsis(form_data.get("imsis")),
            "site-info": form_data.get("site_info"),
            "ip-domain-name": form_data.get("ip_domain_name"),
            "ip-domain-expanded": ip_domain_expanded,
        }

    def to_form_values(self, document: Dict[str, Any]) -> Dict[str, Any]:
        ip_domain_expanded = document.get("ip-domain-expanded") or {}
        ue_dnn_qos = ip_domain_expanded.get("ue-dnn-qos") or {}
        traffic_class = ue_dnn_qos.get("traffic-class") or {}

        values = {
            "group_name": document.get("group-name"),
            "imsis": "\n".join(document.get("imsis") or []),
            "site_info": document.get("site-info"),
            "ip_domain_name": document.get("ip-domain-name"),
            "dnn": ip_domain_expanded.get("dnn"),
            "ue_ip_pool": ip_domain_expanded.get("ue-ip-pool"),
            "dns_primary": ip_domain_expanded.get("dns-primary"),
            "dns_secondary": ip_domain_expanded.get("dns-secondary"),
            "mtu": ip_domain_expanded.get("mtu"),
            "dnn_mbr_uplink": ue_dnn_qos.get("dnn-mbr-uplink"),
            "dnn_mbr_downlink": ue_dnn_qos.get("dnn-mbr-downlink"),
            "bitrate_unit": ue_dnn_qos.get("bitrate-unit") or DEFAULT_BITRATE_UNIT,
            "traffic_class_name": traffic_class.get("name"),
        }
        for key in _TRAFFIC_CLASS_INTS:
            values[f"traffic_class_{key}"] = traffic_class.get(key)
        return values
