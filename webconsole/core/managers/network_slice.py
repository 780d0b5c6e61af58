# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""Network slice manager

Slices are edited through a flat form plus three repeated groups:
``gnodebs`` ([{name, tac}]), ``upfs`` ([{name, port}]) and
``application_rules`` (one dict per rule: rule_name, priority, action,
endpoint, protocol, dest_port_start, dest_port_end, rule_trigger,
app_mbr_uplink, app_mbr_downlink, bitrate_unit and tc_name/qci/arp/pdb/pelr).
"""

import logging
import re
from typing import Any, Dict, List, Optional

from consolectl.constants import (
    DEFAULT_DEST_PORT_END,
    DEFAULT_DEST_PORT_START,
    DEFAULT_RULE_BITRATE_UNIT,
    DEFAULT_RULE_PRIORITY,
    DEFAULT_RULE_PROTOCOL,
    DEFAULT_TRAFFIC_CLASS,
    DEVICE_GROUP_ENDPOINT,
    MCC_PATTERN,
    MNC_PATTERN,
    NETWORK_SLICE_ENDPOINT,
    SD_PATTERN,
    TAC_MAX,
    TAC_MIN,
)
from consolectl.formatters import format_network_slice_list_markdown
from consolectl.http_client import ConfigAPIClient, ConsoleClientError

from webconsole.core.abstract import FormField, ValidationResult
from webconsole.core.managers.base_manager import NamedCollectionManager, form_int, form_text
from webconsole.models.schema import NetworkSlice

logger = logging.getLogger(__name__)


def _entries(value: Any) -> List[Dict[str, Any]]:
    if not value:
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def _is_blank_entry(entry: Dict[str, Any]) -> bool:
    return all(value is None or str(value).strip() == "" for value in entry.values())


class NetworkSliceManager(NamedCollectionManager):
    """Manages /config/v1/network-slice"""

    type = "network-slice"
    display_name = "Network Slice"
    api_endpoint = NETWORK_SLICE_ENDPOINT
    schema = NetworkSlice

    identity_field = "slice-name"
    create_uses_identity = True

    list_section = "network-slices"
    details_section = "network-slice-details"
    empty_message = "No network slices found"
    load_error_prefix = "Failed to load network slices"

    def __init__(self, client: Optional[ConfigAPIClient] = None, **kwargs):
        super().__init__(client, **kwargs)
        self.device_group_options: List[str] = []

    def render(self, data: List[Dict[str, Any]]) -> str:
        if not data:
            return self.show_empty(self.empty_message)
        return format_network_slice_list_markdown(data)

    # ------------------------------------------------------------------
    # Form options
    # ------------------------------------------------------------------

    def load_device_groups(self) -> List[str]:
        """Load device-group names for the site device group select."""
        url = self.client.url(self.api_base, DEVICE_GROUP_ENDPOINT)
        try:
            names = self.client.get_json(url)
        except ConsoleClientError as e:
            logger.warning(f"Failed to load device groups: {e}")
            return self.device_group_options
        if isinstance(names, list):
            self.device_group_options = [n for n in names if isinstance(n, str)]
        return self.device_group_options

    def prepare_create_form(self) -> None:
        self.load_device_groups()

    def prepare_edit_form(self, item_id: Any) -> None:
        self.load_device_groups()

    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        return [
            FormField(id="slice_name", label="Slice Name", required=True, readonly=is_edit),
            FormField(id="sst", label="SST (Slice Service Type)", required=True,
                      placeholder="e.g., 1",
                      help="Values: 1=eMBB, 2=URLLC, 3=mMTC, 4=Custom"),
            FormField(id="sd", label="SD (Slice Differentiator)",
                      placeholder="e.g., 000001 (6 hex digits)",
                      help="Optional: 6 hexadecimal digits"),
            FormField(id="site_name", label="Site Name", required=True, placeholder="e.g., site-1"),
            FormField(id="mcc", label="MCC (Mobile Country Code)", required=True, placeholder="e.g., 001"),
            FormField(id="mnc", label="MNC (Mobile Network Code)", required=True, placeholder="e.g., 01"),
            FormField(id="site_device_group", label="Site Device Groups", type="select",
                      multiple=True,
                      options=[(name, name) for name in self.device_group_options]),
            FormField(id="gnodebs", label="gNodeBs", type="list", required=True,
                      help="Entries of {name, tac}; TAC between 1 and 16777215"),
            FormField(id="upfs", label="UPFs", type="list",
                      help="Entries of {name, port}, e.g. upf-1.example.com / 8805"),
            FormField(id="application_rules", label="Application Filtering Rules", type="list",
                      help="If no rules are specified, a default 'permit any' rule will be created automatically."),
        ]

    # ------------------------------------------------------------------
    # Validation and payload
    # ------------------------------------------------------------------

    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        errors = []

        if not form_text(data, "slice_name"):
            errors.append("Slice name is required")

        if not form_text(data, "sst"):
            errors.append("SST (Slice Service Type) is required")

        sd = form_text(data, "sd")
        if sd and not re.match(SD_PATTERN, sd):
            errors.append("SD must be exactly 6 hexadecimal digits (e.g., 000001)")

        if not form_text(data, "site_name"):
            errors.append("Site name is required")

        if not re.match(MCC_PATTERN, form_text(data, "mcc")):
            errors.append("MCC must be exactly 3 digits")

        if not re.match(MNC_PATTERN, form_text(data, "mnc")):
            errors.append("MNC must be 2 or 3 digits")

        gnodebs = [e for e in _entries(data.get("gnodebs")) if not _is_blank_entry(e)]
        if not gnodebs:
            errors.append("At least one gNodeB is required")
        for index, gnb in enumerate(gnodebs, start=1):
            if not form_text(gnb, "name"):
                errors.append(f"gNodeB {index}: Name is required")
            tac = form_int(gnb.get("tac"))
            if tac is None or tac < TAC_MIN or tac > TAC_MAX:
                errors.append(f"gNodeB {index}: TAC must be between {TAC_MIN} and {TAC_MAX}")

        return ValidationResult.from_errors(errors)

    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        groups = form_data.get("site_device_group")
        if isinstance(groups, (list, tuple)):
            site_device_group = [g for g in groups if g]
        elif groups and str(groups).strip():
            site_device_group = [groups]
        else:
            site_device_group = []

        return {
            "slice-name": form_data.get("slice_name"),
            "slice-id": {
                "sst": form_data.get("sst"),
                "sd": form_data.get("sd") or "",
            },
            "site-device-group": site_device_group,
            "site-info": {
                "site-name": form_data.get("site_name"),
                "plmn": {
                    "mcc": form_data.get("mcc"),
                    "mnc": form_data.get("mnc"),
                },
                "gNodeBs": self.collect_gnodebs(form_data.get("gnodebs")),
                "upf": self.collect_upfs(form_data.get("upfs")),
            },
            "application-filtering-rules": self.collect_application_rules(
                form_data.get("application_rules")
            ),
        }

    @staticmethod
    def collect_gnodebs(entries: Any) -> List[Dict[str, Any]]:
        """Keep gNodeB entries that have both a name and a numeric TAC."""
        gnodebs = []
        for entry in _entries(entries):
            name = form_text(entry, "name")
            tac = form_int(entry.get("tac"))
            if name and tac is not None:
                gnodebs.append({"name": name, "tac": tac})
        return gnodebs

    @staticmethod
    def collect_upfs(entries: Any) -> Dict[str, Dict[str, Any]]:
        """Build the {upf-name: {"upf-port": port}} map."""
        if isinstance(entries, dict):
            return entries
        upfs = {}
        for entry in _entries(entries):
            name = form_text(entry, "name")
            if not name:
                continue
            port = form_int(entry.get("port"))
            upfs[name] = {"upf-port": port} if port is not None else {}
        return upfs

    @staticmethod
    def collect_application_rules(entries: Any) -> List[Dict[str, Any]]:
        """Shape rule entries, applying defaults; rules without name, action or endpoint are dropped."""
        rules = []
        for entry in _entries(entries):
            rule_name = form_text(entry, "rule_name")
            action = form_text(entry, "action")
            endpoint = form_text(entry, "endpoint")
            if not (rule_name and action and endpoint):
                continue
            rules.append({
                "rule-name": rule_name,
                "priority": form_int(entry.get("priority")) or DEFAULT_RULE_PRIORITY,
                "action": action,
                "endpoint": endpoint,
                "protocol": form_int(entry.get("protocol")) or DEFAULT_RULE_PROTOCOL,
                "dest-port-start": form_int(entry.get("dest_port_start")) or DEFAULT_DEST_PORT_START,
                "dest-port-end": form_int(entry.get("dest_port_end")) or DEFAULT_DEST_PORT_END,
                "rule-trigger": form_text(entry, "rule_trigger"),
                "app-mbr-uplink": form_int(entry.get("app_mbr_uplink")) or 0,
                "app-mbr-downlink": form_int(entry.get("app_mbr_downlink")) or 0,
                "bitrate-unit": form_text(entry, "bitrate_unit") or DEFAULT_RULE_BITRATE_UNIT,
                "traffic-class": {
                    "name": form_text(entry, "tc_name") or DEFAULT_TRAFFIC_CLASS["name"],
                    "qci": form_int(entry.get("tc_qci")) or DEFAULT_TRAFFIC_CLASS["qci"],
                    "arp": form_int(entry.get("tc_arp")) or DEFAULT_TRAFFIC_CLASS["arp"],
                    "pdb": form_int(entry.get("tc_pdb")) or DEFAULT_TRAFFIC_CLASS["pdb"],
                    "pelr": form_int(entry.get("tc_pelr")) or DEFAULT_TRAFFIC_CLASS["pelr"],
                },
            })
        return rules

    def to_form_values(self, document: Dict[str, Any]) -> Dict[str, Any]:
        slice_id = document.get("slice-id") or {}
        site_info = document.get("site-info") or {}
        plmn = site_info.get("plmn") or {}
        upf = site_info.get("upf") or {}

        rules = []
        for rule in document.get("application-filtering-rules") or []:
            traffic_class = rule.get("traffic-class") or {}
            rules.append({
                "rule_name": rule.get("rule-name"),
                "priority": rule.get("priority"),
                "action": rule.get("action"),
                "endpoint": rule.get("endpoint"),
                "protocol": rule.get("protocol"),
                "dest_port_start": rule.get("dest-port-start"),
                "dest_port_end": rule.get("dest-port-end"),
                "rule_trigger": rule.get("rule-trigger"),
                "app_mbr_uplink": rule.get("app-mbr-uplink"),
                "app_mbr_downlink": rule.get("app-mbr-downlink"),
                "bitrate_unit": rule.get("bitrate-unit"),
                "tc_name": traffic_class.get("name"),
                "tc_qci": traffic_class.get("qci"),
                "tc_arp": traffic_class.get("arp"),
                "tc_pdb": traffic_class.get("pdb"),
                "tc_pelr": traffic_class.get("pelr"),
            })

        return {
            "slice_name": document.get("slice-name"),
            "sst": slice_id.get("sst"),
            "sd": slice_id.get("sd"),
            "site_name": site_info.get("site-name"),
            "mcc": plmn.get("mcc"),
            "mnc": plmn.get("mnc"),
            "site_device_group": list(document.get("site-device-group") or []),
            "gnodebs": [
                {"name": gnb.get("name"), "tac": gnb.get("tac")}
                for gnb in site_info.get("gNodeBs") or []
            ],
            "upfs": [
                {"name": name, "port": (info or {}).get("upf-port")}
                for name, info in upf.items()
            ],
            "application_rules": rules,
        }
