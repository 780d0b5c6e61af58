# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""gNB and UPF inventory managers"""

import logging
from typing import Any, Dict, List

from consolectl.constants import GNB_ENDPOINT, TAC_MAX, TAC_MIN, UPF_ENDPOINT
from consolectl.formatters import format_gnb_list_markdown, format_upf_list_markdown

from webconsole.core.abstract import FormField, ValidationResult
from webconsole.core.managers.base_manager import BaseManager, form_int, form_text
from webconsole.models.schema import Gnb, Upf

logger = logging.getLogger(__name__)


class GnbManager(BaseManager):
    """Manages /config/v1/inventory/gnb"""

    type = "gnb"
    display_name = "gNB"
    api_endpoint = GNB_ENDPOINT
    schema = Gnb

    identity_field = "name"
    create_uses_identity = True
    range_checked_fields = ("tac",)

    list_section = "gnb-inventory"
    details_section = "gnb-details"
    empty_message = "No gNBs found"

    def render(self, data: List[Dict[str, Any]]) -> str:
        if not data:
            return self.show_empty(self.empty_message)
        return format_gnb_list_markdown(data)

    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        return [
            FormField(id="name", label="gNB Name", required=True, readonly=is_edit),
            FormField(id="tac", label="TAC (Tracking Area Code)", type="number",
                      placeholder="e.g., 1", min=TAC_MIN, max=TAC_MAX,
                      help=f"Optional: Integer value between {TAC_MIN} and {TAC_MAX}"),
        ]

    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        errors = []

        if not form_text(data, "name"):
            errors.append("gNB name is required")

        if form_text(data, "tac"):
            tac = form_int(data.get("tac"))
            if tac is None or tac < TAC_MIN or tac > TAC_MAX:
                errors.append(f"TAC must be between {TAC_MIN} and {TAC_MAX}")

        return ValidationResult.from_errors(errors)

    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": form_data.get("name")}
        # TAC is optional on the wire
        tac = form_int(form_data.get("tac"))
        if tac is not None:
            payload["tac"] = tac
        return payload

    def to_form_values(self, document: Dict[str, Any]) -> Dict[str, Any]:
        return {"name": document.get("name"), "tac": document.get("tac")}


class UpfManager(BaseManager):
    """Manages /config/v1/inventory/upf"""

    type = "upf"
    display_name = "UPF"
    api_endpoint = UPF_ENDPOINT
    schema = Upf

    identity_field = "hostname"
    create_uses_identity = True

    list_section = "upf-inventory"
    empty_message = "No UPFs found"

    def render(self, data: List[Dict[str, Any]]) -> str:
        if not data:
            return self.show_empty(self.empty_message)
        return format_upf_list_markdown(data)

    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        return [
            FormField(id="hostname", label="UPF Hostname", required=True, readonly=is_edit),
            FormField(id="port", label="Port", required=True, placeholder="e.g., 8805",
                      help="Port number as string"),
        ]

    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        errors = []
        if not form_text(data, "hostname"):
            errors.append("UPF hostname is required")
        if not form_text(data, "port"):
            errors.append("Port is required")
        return ValidationResult.from_errors(errors)

    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        port = form_data.get("port")
        return {
            "hostname": form_data.get("hostname"),
            "port": str(port) if port is not None else None,
        }
