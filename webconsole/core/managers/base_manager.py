# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Generic REST contract for console entities.

BaseManager implements list/get/create/update/delete against
{api_base}{api_endpoint}[/{id}] plus the loading/error/empty view
states and the details-view lifecycle. NamedCollectionManager adds the
name-list-then-details listing used by device groups and slices.
"""

import logging
import math
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple, Type

from consolectl.constants import API_BASE, DETAIL_FETCH_WORKERS
from consolectl.formatters import (
    format_details_markdown,
    format_empty,
    format_error,
    format_loading,
)
from consolectl.http_client import (
    ConfigAPIClient,
    ConsoleClientError,
    SchemaValidationError,
    get_client,
    quote_id,
)

from webconsole.core.abstract import EntityManager, FormField, Result, ValidationResult
from webconsole.models.schema import ConsoleDocument, parse_document

logger = logging.getLogger(__name__)


def form_text(data: Dict[str, Any], key: str) -> str:
    """Form value as a stripped string ('' when missing)."""
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


_INT_RE = re.compile(r"^[+-]?[0-9]+\Z")


def form_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Parse an integer form value, falling back to default when blank or invalid."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else default
    text = str(value).strip()
    # ASCII digits only
    if not _INT_RE.match(text):
        return default
    return int(text)


class BaseManager(EntityManager):
    """Generic CRUD client for one config API resource."""

    api_endpoint: str = ""
    api_base: str = API_BASE
    schema: Optional[Type[ConsoleDocument]] = None

    # Wire field holding the identity, and whether POST puts it on the path
    identity_field: Optional[str] = None
    create_uses_identity: bool = False

    # Number fields whose validate_form_data already reports bad input
    range_checked_fields: Tuple[str, ...] = ()

    list_section: Optional[str] = None
    details_section: Optional[str] = None
    empty_message: str = "No items found"
    load_error_prefix: str = "Failed to load data"

    def __init__(self, client: Optional[ConfigAPIClient] = None):
        """
        Initialize the manager.

        Args:
            client: Optional config API client. Uses singleton if not provided.
        """
        self._client = client
        self.data: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.view: str = ""

        # Details view state
        self.current_name: Optional[str] = None
        self.current_data: Optional[Dict[str, Any]] = None
        self.details_view: str = ""
        self.edit_mode: bool = False

    @property
    def client(self) -> ConfigAPIClient:
        """Get the config API client, creating if needed."""
        if self._client is None:
            self._client = get_client()
        return self._client

    def endpoint_url(self, *parts: Any) -> str:
        """Absolute URL for the collection or one of its members."""
        path = self.api_endpoint + "".join(f"/{quote_id(p)}" for p in parts)
        return self.client.url(self.api_base, path)

    # ------------------------------------------------------------------
    # REST contract
    # ------------------------------------------------------------------

    def load_data(self) -> List[Dict[str, Any]]:
        self.show_loading()
        try:
            body = self.client.get_json(self.endpoint_url())
            self.data = self._parse_items(self.normalize_list(body))
            self.error = None
            self.view = self.render(self.data)
        except ConsoleClientError as e:
            logger.error(f"Load {self.type} error: {e}")
            self.data = []
            self.show_error(f"{self.load_error_prefix}: {e}")
        return self.data

    @staticmethod
    def normalize_list(body: Any) -> List[Any]:
        """Wrap a bare object into a one-element list; empty bodies become []."""
        if isinstance(body, list):
            return body
        return [body] if body else []

    def get_item(self, item_id: Any) -> Dict[str, Any]:
        """
        Fetch one item.

        Raises:
            APIResponseError: On non-2xx ("HTTP {status}: {reason}").
            SchemaValidationError: If the body does not match the schema.
        """
        body = self.client.get_json(self.endpoint_url(item_id))
        return self._to_dict(self.from_response(body))

    def create_item(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.create_uses_identity:
            url = self.endpoint_url(self.identity_of(payload))
        else:
            url = self.endpoint_url()
        logger.info(f"Creating {self.type} at {url}")
        return self.client.send_json("POST", url, payload)

    def update_item(self, item_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"Updating {self.type} {item_id}")
        return self.client.send_json("PUT", self.endpoint_url(item_id), payload)

    def delete_item(self, item_id: Any) -> bool:
        logger.info(f"Deleting {self.type} {item_id}")
        return self.client.delete(self.endpoint_url(item_id))

    def identity_of(self, payload: Dict[str, Any]) -> str:
        value = payload.get(self.identity_field) if self.identity_field else None
        if value is None or str(value).strip() == "":
            raise ConsoleClientError(
                f"{self.identity_field} is required for {self.display_name} creation"
            )
        return str(value)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def from_response(self, raw: Any) -> Any:
        if self.schema is None:
            if not isinstance(raw, dict):
                raise SchemaValidationError(
                    f"Expected {self.display_name} object, got {type(raw).__name__}"
                )
            return raw
        return parse_document(self.schema, raw)

    def _parse_items(self, items: List[Any]) -> List[Dict[str, Any]]:
        parsed = []
        for raw in items:
            try:
                parsed.append(self._to_dict(self.from_response(raw)))
            except SchemaValidationError as e:
                logger.warning(f"Skipping invalid {self.type} entry: {e}")
        return parsed

    @staticmethod
    def _to_dict(document: Any) -> Dict[str, Any]:
        if isinstance(document, ConsoleDocument):
            return document.to_document()
        return dict(document)

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        return ValidationResult()

    def number_errors(self, data: Dict[str, Any], is_edit: bool = False) -> List[str]:
        """Errors for non-blank number fields that are not whole numbers."""
        errors = []
        for field in self.get_form_fields(is_edit=is_edit):
            if field.type != "number" or field.id in self.range_checked_fields:
                continue
            if form_text(data, field.id) and form_int(data.get(field.id)) is None:
                errors.append(f"{field.label} must be a whole number")
        return errors

    def check_form(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        """validate_form_data plus the generic number check."""
        validation = self.validate_form_data(data, is_edit=is_edit)
        return ValidationResult.from_errors(validation.errors + self.number_errors(data, is_edit))

    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        return dict(form_data)

    def to_form_values(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten a fetched document into form values (top-level scalars only)."""
        return {
            key: value for key, value in document.items()
            if not isinstance(value, (dict, list))
        }

    def prepare_create_form(self) -> None:
        """Hook run before the create form is shown (load select options)."""
        pass

    def prepare_edit_form(self, item_id: Any) -> None:
        """Hook run before the edit form is shown."""
        pass

    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        raise NotImplementedError(f"{type(self).__name__} must define get_form_fields()")

    def render(self, data: List[Dict[str, Any]]) -> str:
        raise NotImplementedError(f"{type(self).__name__} must define render()")

    # ------------------------------------------------------------------
    # View states
    # ------------------------------------------------------------------

    def show_loading(self) -> None:
        self.view = format_loading()

    def show_error(self, message: Optional[str]) -> None:
        self.error = str(message) if message else "An unknown error occurred"
        self.view = format_error(self.error)

    def show_empty(self, message: str) -> str:
        self.view = format_empty(message)
        return self.view

    # ------------------------------------------------------------------
    # Details view
    # ------------------------------------------------------------------

    def show_details(self, item_id: Any) -> Dict[str, Any]:
        """Load one item into the details view and leave edit mode."""
        data = self.get_item(item_id)
        self.current_name = str(item_id)
        self.current_data = data
        self.edit_mode = False
        self.details_view = self.render_details(data)
        return data

    def details_title(self, data: Dict[str, Any]) -> str:
        return f"{self.display_name}: {self.current_name}"

    def render_details(self, data: Dict[str, Any]) -> str:
        return format_details_markdown(self.details_title(data), data)

    def toggle_edit_mode(self, enable: Optional[bool] = None) -> bool:
        self.edit_mode = (not self.edit_mode) if enable is None else enable
        return self.edit_mode

    def save_details_edit(self, form_data: Dict[str, Any]) -> Result:
        """
        Validate and save the details-view edit form, then refresh the view.

        Returns:
            Result; on validation failure ``error`` holds the joined messages.
        """
        if self.current_name is None:
            return Result(success=False, error=f"No {self.display_name} selected")

        validation = self.check_form(form_data, is_edit=True)
        if not validation.is_valid:
            return Result(success=False, error="\n".join(validation.errors))

        label = self.display_name.lower()
        try:
            self.update_item(self.current_name, self.prepare_payload(form_data, is_edit=True))
            self.show_details(self.current_name)
        except ConsoleClientError as e:
            logger.error(f"Failed to save {label} {self.current_name}: {e}")
            return Result(success=False, message=f"Failed to save {label}", error=str(e))

        self.toggle_edit_mode(False)
        return Result(success=True, message=f"{self.display_name} updated successfully")

    def delete_from_details(self) -> Result:
        """Delete the item shown in the details view and clear it."""
        if self.current_name is None:
            return Result(success=False, error=f"No {self.display_name} selected")

        label = self.display_name.lower()
        try:
            self._delete_current()
        except ConsoleClientError as e:
            logger.error(f"Failed to delete {label} {self.current_name}: {e}")
            return Result(success=False, message=f"Failed to delete {label}", error=str(e))

        self.current_name = None
        self.current_data = None
        self.details_view = ""
        self.edit_mode = False
        return Result(
            success=True,
            message=f"{self.display_name} deleted successfully",
            data={"section": self.list_section}
        )

    def _delete_current(self) -> bool:
        return self.delete_item(self.current_name)


class NamedCollectionManager(BaseManager):
    """Resource whose list endpoint returns names; details fetched per name."""

    invalid_list_message = "Invalid response format from server"

    def __init__(
        self,
        client: Optional[ConfigAPIClient] = None,
        max_workers: int = DETAIL_FETCH_WORKERS
    ):
        super().__init__(client)
        self.max_workers = max(1, max_workers)

    def list_names(self) -> List[str]:
        """
        Fetch the name list.

        Raises:
            ConsoleClientError: On transport/HTTP failure or a non-list body.
        """
        names = self.client.get_json(self.endpoint_url())
        if names is None:
            return []
        if not isinstance(names, list):
            logger.error(f"Expected array of {self.type} names, got: {names!r}")
            raise ConsoleClientError(self.invalid_list_message)
        valid = []
        for name in names:
            if isinstance(name, str):
                valid.append(name)
            else:
                logger.warning(f"Invalid {self.type} name: {name!r}")
        return valid

    def load_data(self) -> List[Dict[str, Any]]:
        self.show_loading()
        try:
            names = self.list_names()
        except ConsoleClientError as e:
            logger.error(f"Load {self.type} error: {e}")
            self.data = []
            if str(e) == self.invalid_list_message:
                self.show_error(self.invalid_list_message)
            else:
                self.show_error(f"{self.load_error_prefix}: {e}")
            return self.data

        self.data = self.fetch_details(names)
        self.error = None
        self.view = self.render(self.data)
        return self.data

    def fetch_details(self, names: List[str]) -> List[Dict[str, Any]]:
        """Fetch details for every name on a bounded pool, keeping name order."""
        if not names:
            return []
        workers = min(self.max_workers, len(names))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(self._fetch_detail, names))
        return [r for r in results if r is not None]

    def _fetch_detail(self, name: str) -> Optional[Dict[str, Any]]:
        try:
            return self.get_item(name)
        except ConsoleClientError as e:
            logger.warning(f"Failed to load details for {self.type} {name}: {e}")
            return None
