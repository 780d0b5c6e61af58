# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Create/edit modal state machine.

The modal is either hidden, creating (current_edit_name == "") or
editing (current_edit_name set). Managers are looked up by type tag.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from consolectl.constants import TYPE_MAPPING
from consolectl.http_client import ConsoleClientError

from webconsole.core.abstract import FormField, Result
from webconsole.core.managers.base_manager import BaseManager, form_int

if TYPE_CHECKING:
    from webconsole.core.context import AppContext

logger = logging.getLogger(__name__)

_TRUE_VALUES = (True, 1, "1", "true", "on", "yes")


class ModalManager:
    """Routes the create/edit modal lifecycle to entity managers."""

    def __init__(self, ctx: "AppContext"):
        self.ctx = ctx
        self.current_edit_type: str = ""
        self.current_edit_name: str = ""
        self.visible: bool = False
        self.title: str = ""
        self.fields: List[FormField] = []
        self.values: Dict[str, Any] = {}

    @property
    def is_edit(self) -> bool:
        return bool(self.current_edit_name)

    def get_manager_by_type(self, type: str) -> Optional[BaseManager]:
        manager_key = TYPE_MAPPING.get(type)
        return self.ctx.managers.get(manager_key) if manager_key else None

    def _unknown_type(self, type: str) -> Result:
        message = f"Unknown type: {type}"
        self.ctx.notifications.show_error(message)
        return Result(success=False, error=message)

    def show_create_form(self, type: str) -> Result:
        manager = self.get_manager_by_type(type)
        if manager is None:
            return self._unknown_type(type)

        self.current_edit_type = type
        self.current_edit_name = ""
        manager.prepare_create_form()
        self.title = f"Create {manager.display_name}"
        self.fields = manager.get_form_fields(is_edit=False)
        self.values = {f.id: f.default for f in self.fields if f.default is not None}
        self.visible = True
        return Result(success=True, message=self.title)

    def edit_item(self, type: str, name: Any) -> Result:
        manager = self.get_manager_by_type(type)
        if manager is None:
            return self._unknown_type(type)

        self.current_edit_type = type
        self.current_edit_name = str(name)
        manager.prepare_edit_form(name)
        self.title = f"Edit {manager.display_name}: {name}"
        self.fields = manager.get_form_fields(is_edit=True)
        self.visible = True
        try:
            self.values = manager.to_form_values(manager.get_item(name))
        except ConsoleClientError as e:
            logger.error(f"Failed to load {type} {name}: {e}")
            notification = self.ctx.notifications.show_api_error(e, "load item data")
            self.values = {}
            return Result(success=False, message=self.title, error=notification.message)
        return Result(success=True, message=self.title, data=self.values)

    def collect_form_data(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        """Coerce raw form input by the field types of the open form."""
        data = dict(raw)
        for field in self.fields:
            if field.id not in raw:
                continue
            value = raw[field.id]
            if field.type == "checkbox":
                data[field.id] = value in _TRUE_VALUES
            elif field.type == "number":
                number = form_int(value)
                # Unparseable input is kept so validation can report it
                if number is None and value is not None and str(value).strip():
                    data[field.id] = value
                else:
                    data[field.id] = number
            elif field.multiple:
                values = value if isinstance(value, (list, tuple)) else [value]
                data[field.id] = [v for v in values if v not in (None, "")]
            elif field.type == "list":
                data[field.id] = list(value) if value else []
            else:
                data[field.id] = value if value not in (None, "") else None
        return data

    def save_item(self, raw_form: Dict[str, Any]) -> Result:
        manager = self.get_manager_by_type(self.current_edit_type)
        if manager is None:
            return self._unknown_type(self.current_edit_type)

        form_data = self.collect_form_data(raw_form)
        validation = manager.check_form(form_data, is_edit=self.is_edit)
        if not validation.is_valid:
            message = "\n".join(validation.errors)
            self.ctx.notifications.show_error(message)
            return Result(success=False, error=message)

        try:
            payload = manager.prepare_payload(form_data, is_edit=self.is_edit)
            if self.is_edit:
                manager.update_item(self.current_edit_name, payload)
                message = f"{manager.display_name} updated successfully"
            else:
                manager.create_item(payload)
                message = f"{manager.display_name} created successfully"
        except ConsoleClientError as e:
            notification = self.ctx.notifications.show_api_error(
                e, "update item" if self.is_edit else "create item"
            )
            return Result(success=False, error=notification.message)

        self.ctx.notifications.show_success(message)
        self.hide()
        manager.load_data()
        return Result(success=True, message=message, data=payload)

    def delete_item(self, type: str, name: Any) -> Result:
        manager = self.get_manager_by_type(type)
        if manager is None:
            return self._unknown_type(type)

        if not self.ctx.confirm(f"Are you sure you want to delete {manager.display_name}: {name}?"):
            return Result(success=False, message="Deletion cancelled")

        try:
            manager.delete_item(name)
        except ConsoleClientError as e:
            notification = self.ctx.notifications.show_api_error(e, "delete item")
            return Result(success=False, error=notification.message)

        message = f"{manager.display_name} deleted successfully"
        self.ctx.notifications.show_success(message)
        manager.load_data()
        return Result(success=True, message=message)

    def hide(self) -> None:
        self.visible = False
        self.current_edit_type = ""
        self.current_edit_name = ""
        self.title = ""
        self.fields = []
        self.values = {}
