# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""Subscriber list manager (paginated /api/subscriber)"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from consolectl.constants import (
    DEFAULT_PAGE_LIMIT,
    HEX_PATTERN,
    K4_ENDPOINT,
    PLMN_ID_PATTERN,
    SUBSCRIBER_API_BASE,
    SUBSCRIBER_ENDPOINT,
)
from consolectl.formatters import format_subscriber_list_markdown
from consolectl.http_client import ConfigAPIClient, ConsoleClientError, SchemaValidationError

from webconsole.core.abstract import FormField, ValidationResult
from webconsole.core.managers.base_manager import BaseManager, form_int, form_text
from webconsole.models.schema import Subscriber, SubscriberSummary, parse_document

logger = logging.getLogger(__name__)


class ListState(BaseModel):
    """Subscriber list query (sent as GET parameters)"""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, ge=1)
    plmnID: str = ""
    q: str = ""
    ueId: str = ""

    def to_params(self) -> Dict[str, str]:
        params = {"page": str(self.page), "limit": str(self.limit)}
        for key in ("plmnID", "q", "ueId"):
            value = getattr(self, key)
            if value:
                params[key] = value
        return params


class ListMeta(BaseModel):
    """Pagination metadata returned with the subscriber list"""

    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    total: int = 0
    pages: int = 0


def _meta_int(value: Any, fallback: int) -> int:
    number = form_int(value)
    return number if number else fallback


class SubscriberListManager(BaseManager):
    """Manages /api/subscriber"""

    type = "subscriber"
    display_name = "Subscriber"
    api_base = SUBSCRIBER_API_BASE
    api_endpoint = SUBSCRIBER_ENDPOINT
    schema = Subscriber

    identity_field = "ueId"
    create_uses_identity = True

    list_section = "subscribers-list"
    details_section = "subscriber-details"
    empty_message = "No subscribers found"
    load_error_prefix = "Failed to load subscribers"

    def __init__(self, client: Optional[ConfigAPIClient] = None):
        super().__init__(client)
        self.list_state = ListState()
        self.list_meta = ListMeta()
        self.k4_options: List[Tuple[str, str]] = []

    # ------------------------------------------------------------------
    # Listing and paging
    # ------------------------------------------------------------------

    def load_data(self) -> List[Dict[str, Any]]:
        self.show_loading()
        try:
            body = self.client.get_json(self.endpoint_url(), params=self.list_state.to_params())
        except ConsoleClientError as e:
            logger.error(f"Load subscribers error: {e}")
            self.data = []
            self.show_error(f"{self.load_error_prefix}: {e}")
            return self.data

        # Backend answers with a legacy array or a paginated object
        if isinstance(body, list):
            items = body
            self.list_meta = ListMeta(page=1, limit=len(items), total=len(items), pages=1)
        elif isinstance(body, dict):
            items = body.get("items") if isinstance(body.get("items"), list) else []
            self.list_meta = ListMeta(
                page=_meta_int(body.get("page"), self.list_state.page),
                limit=_meta_int(body.get("limit"), self.list_state.limit),
                total=form_int(body.get("total"), 0) or 0,
                pages=form_int(body.get("pages"), 0) or 0,
            )
        else:
            items = []
            self.list_meta = ListMeta(page=1, limit=0, total=0, pages=1)

        self.data = self._parse_summaries(items)
        self.error = None
        self.view = self.render(self.data)
        return self.data

    def _parse_summaries(self, items: List[Any]) -> List[Dict[str, Any]]:
        summaries = []
        for raw in items:
            try:
                summaries.append(parse_document(SubscriberSummary, raw).to_document())
            except SchemaValidationError as e:
                logger.warning(f"Skipping invalid subscriber entry: {e}")
        return summaries

    def set_list_state(self, **changes: Any) -> ListState:
        self.list_state = self.list_state.model_copy(update=changes)
        return self.list_state

    def go_to_page(self, page: Any) -> List[Dict[str, Any]]:
        self.set_list_state(page=max(1, form_int(page, 1) or 1))
        return self.load_data()

    def next_page(self) -> List[Dict[str, Any]]:
        page = (self.list_meta.page or self.list_state.page) + 1
        if self.list_meta.pages > 0:
            page = min(page, self.list_meta.pages)
        return self.go_to_page(page)

    def previous_page(self) -> List[Dict[str, Any]]:
        return self.go_to_page((self.list_meta.page or self.list_state.page) - 1)

    def apply_list_controls(
        self,
        q: str = "",
        ue_id: str = "",
        plmn_id: str = "",
        limit: Any = None
    ) -> List[Dict[str, Any]]:
        """Apply search filters and page size, restarting at page 1."""
        new_limit = form_int(limit)
        if new_limit is None or new_limit <= 0:
            new_limit = self.list_state.limit
        self.set_list_state(
            q=(q or "").strip(),
            ueId=(ue_id or "").strip(),
            plmnID=(plmn_id or "").strip(),
            limit=new_limit,
            page=1,
        )
        return self.load_data()

    def clear_list_controls(self) -> List[Dict[str, Any]]:
        self.set_list_state(page=1, plmnID="", q="", ueId="")
        return self.load_data()

    def render(self, data: List[Dict[str, Any]]) -> str:
        return format_subscriber_list_markdown(data, self.list_meta.model_dump())

    # ------------------------------------------------------------------
    # Single subscriber
    # ------------------------------------------------------------------

    def get_item(self, item_id: Any) -> Dict[str, Any]:
        body = self.client.get_json(self.endpoint_url(item_id))
        if isinstance(body, dict) and not body.get("ueId"):
            body = {**body, "ueId": str(item_id)}
        return self._to_dict(self.from_response(body))

    def load_k4_keys(self) -> List[Tuple[str, str]]:
        """Load K4 keys as (sno, label) options for the K4 SNO select."""
        url = self.client.url(SUBSCRIBER_API_BASE, K4_ENDPOINT)
        try:
            keys = self.client.get_json(url)
        except ConsoleClientError as e:
            logger.warning(f"Failed to load K4 keys: {e}")
            self.k4_options = []
            return self.k4_options

        options = []
        for key in keys if isinstance(keys, list) else []:
            if not isinstance(key, dict) or key.get("k4_sno") is None:
                continue
            preview = (key.get("k4") or "")[:8]
            options.append((str(key["k4_sno"]), f"SNO {key['k4_sno']} - Key: {preview}..."))
        self.k4_options = options
        return self.k4_options

    def prepare_create_form(self) -> None:
        self.load_k4_keys()

    def prepare_edit_form(self, item_id: Any) -> None:
        self.load_k4_keys()

    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        return [
            FormField(id="sub_ueId", label="UE ID (IMSI)", required=True, readonly=is_edit,
                      placeholder="e.g., imsi-208930100007487",
                      help="International Mobile Subscriber Identity"),
            FormField(id="sub_plmnID", label="PLMN ID", required=True, placeholder="5 or 6 digits",
                      help="Public Land Mobile Network ID"),
            FormField(id="sub_key", label="Key (Ki)", required=True,
                      placeholder="Hexadecimal characters",
                      help="Authentication key (hexadecimal characters)"),
            FormField(id="sub_opc", label="OPc", required=True,
                      placeholder="Hexadecimal characters",
                      help="Operator key (hexadecimal characters)"),
            FormField(id="sub_sequenceNumber", label="Sequence Number (SQN)", required=True,
                      placeholder="e.g., 16f3b3f70fc2",
                      help="Authentication sequence number"),
            FormField(id="sub_k4_sno", label="K4 SNO", type="select",
                      options=[("", "None (Optional)")] + self.k4_options,
                      help="K4 Serial Number reference (optional)"),
            FormField(id="sub_encryptionAlgorithm", label="Encryption Algorithm", type="number",
                      placeholder="e.g., 0", min=0, default=0,
                      help="Algorithm identifier for encryption (optional)"),
        ]

    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        errors = []

        if not form_text(data, "sub_ueId"):
            errors.append("UE ID is required")

        if not re.match(PLMN_ID_PATTERN, form_text(data, "sub_plmnID")):
            errors.append("PLMN ID must be 5 or 6 digits")

        if not re.match(HEX_PATTERN, form_text(data, "sub_key")):
            errors.append("Key (Ki) must contain only hexadecimal characters")

        if not re.match(HEX_PATTERN, form_text(data, "sub_opc")):
            errors.append("OPc must contain only hexadecimal characters")

        if not form_text(data, "sub_sequenceNumber"):
            errors.append("Sequence Number is required")

        return ValidationResult.from_errors(errors)

    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "ueId": form_text(form_data, "sub_ueId"),
            "plmnID": form_text(form_data, "sub_plmnID"),
            "OPc": form_text(form_data, "sub_opc"),
            "Key": form_text(form_data, "sub_key"),
            "SequenceNumber": form_text(form_data, "sub_sequenceNumber"),
            "EncryptionAlgorithm": form_int(form_data.get("sub_encryptionAlgorithm"), 0) or 0,
        }
        k4_sno = form_int(form_data.get("sub_k4_sno"))
        if k4_sno is not None:
            payload["k4_sno"] = k4_sno
        return payload

    def to_form_values(self, document: Dict[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {
            "sub_ueId": document.get("ueId"),
            "sub_plmnID": document.get("plmnID"),
            "sub_key": document.get("Key"),
            "sub_opc": document.get("OPc"),
            "sub_sequenceNumber": document.get("SequenceNumber"),
            "sub_encryptionAlgorithm": document.get("EncryptionAlgorithm"),
            "sub_k4_sno": document.get("k4_sno"),
        }
        # Full subscriber data nests the credentials
        auth = document.get("AuthenticationSubscription") or {}
        if auth:
            opc = auth.get("Opc") or {}
            values["sub_key"] = (auth.get("PermanentKey") or {}).get("PermanentKeyValue", values["sub_key"])
            values["sub_opc"] = opc.get("OpcValue", values["sub_opc"])
            values["sub_sequenceNumber"] = auth.get("SequenceNumber", values["sub_sequenceNumber"])
            if opc.get("EncryptionAlgorithm") is not None:
                values["sub_encryptionAlgorithm"] = opc["EncryptionAlgorithm"]
        if values["sub_encryptionAlgorithm"] is None:
            values["sub_encryptionAlgorithm"] = 0
        return values
