# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""K4 transport key manager"""

import logging
import re
from typing import Any, Dict, List, Optional

from consolectl.constants import (
    HEX_PATTERN,
    K4_ENDPOINT,
    K4_KEY_LABELS,
    K4_KEY_TYPES,
    K4_SNO_MAX,
    K4_SNO_MIN,
    SUBSCRIBER_API_BASE,
)
from consolectl.formatters import format_k4_list_markdown
from consolectl.http_client import ConsoleClientError

from webconsole.core.abstract import FormField, ValidationResult
from webconsole.core.managers.base_manager import BaseManager, form_int, form_text
from webconsole.models.schema import K4Key

logger = logging.getLogger(__name__)


class K4Manager(BaseManager):
    """
    Manages /api/k4opt.

    Keys are identified by (k4_sno, key_label): updates go to
    /k4opt/{sno} and deletes to /k4opt/{sno}/{label}.
    """

    type = "k4-key"
    display_name = "K4 Key"
    api_base = SUBSCRIBER_API_BASE
    api_endpoint = K4_ENDPOINT
    schema = K4Key

    identity_field = "k4_sno"
    range_checked_fields = ("k4_sno",)

    list_section = "k4-keys"
    details_section = "k4-details"
    empty_message = "No K4 keys found. Add one to provision a subscriber."

    def render(self, data: List[Dict[str, Any]]) -> str:
        if not data:
            return self.show_empty(self.empty_message)
        return format_k4_list_markdown(data)

    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        return [
            FormField(id="k4_sno", label="K4 Serial Number (SNO)", type="number",
                      required=not is_edit, readonly=is_edit,
                      min=K4_SNO_MIN, max=K4_SNO_MAX,
                      help=f"Value between {K4_SNO_MIN}-{K4_SNO_MAX} (byte)"),
            FormField(id="key_label", label="Key Label", type="select",
                      required=not is_edit, readonly=is_edit,
                      options=[(label, label) for label in K4_KEY_LABELS],
                      help=("Key Label cannot be changed in edit mode" if is_edit
                            else "Select the encryption key label")),
            FormField(id="key_type", label="Key Type", type="select",
                      required=not is_edit, readonly=is_edit,
                      options=[(key_type, key_type) for key_type in K4_KEY_TYPES],
                      help=("Key Type cannot be changed in edit mode" if is_edit
                            else "Select the encryption algorithm type")),
            FormField(id="k4", label="K4 Key", required=True,
                      placeholder="e.g., 00112233445566778899aabbccddeeff",
                      help="Hexadecimal key value"),
        ]

    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        errors = []

        # Identity fields are locked once the key exists
        if not is_edit:
            sno = form_int(data.get("k4_sno"))
            if sno is None or sno < K4_SNO_MIN or sno > K4_SNO_MAX:
                errors.append(f"K4 SNO is required and must be between {K4_SNO_MIN}-{K4_SNO_MAX}.")
            if not form_text(data, "key_label"):
                errors.append("Key Label is required.")
            if not form_text(data, "key_type"):
                errors.append("Key Type is required.")

        k4 = form_text(data, "k4")
        if not k4 or not re.match(HEX_PATTERN, k4):
            errors.append("K4 Key must contain only hexadecimal characters.")

        return ValidationResult.from_errors(errors)

    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        return {
            "k4_sno": form_int(form_data.get("k4_sno")),
            "k4": form_text(form_data, "k4").lower(),
            "key_label": form_data.get("key_label"),
            "key_type": form_data.get("key_type"),
        }

    def to_form_values(self, document: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "k4_sno": document.get("k4_sno"),
            "key_label": document.get("key_label"),
            "key_type": document.get("key_type"),
            "k4": document.get("k4"),
        }

    def delete_item(self, item_id: Any, key_label: Optional[str] = None) -> bool:
        """
        Delete a key by serial number and label.

        When no label is given it is read from the stored key first.
        """
        if not key_label:
            key_label = self.get_item(item_id).get("key_label")
            if not key_label:
                raise ConsoleClientError(f"K4 key {item_id} has no key label")
        logger.info(f"Deleting k4-key {item_id}/{key_label}")
        return self.client.delete(self.endpoint_url(item_id, key_label))

    def _delete_current(self) -> bool:
        data = self.current_data or {}
        sno = data.get("k4_sno", self.current_name)
        return self.delete_item(sno, data.get("key_label"))

    def details_title(self, data: Dict[str, Any]) -> str:
        return f"{self.display_name}: SNO {data.get('k4_sno', self.current_name)}"
