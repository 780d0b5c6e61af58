# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""Abstract base class for console entity managers"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


class Result(BaseModel):
    """Operation result"""

    success: bool
    message: str = ""
    error: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class ValidationResult(BaseModel):
    """Client-side form validation outcome"""

    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)


class FormField(BaseModel):
    """Create/edit form field definition"""

    id: str
    label: str
    type: Literal["text", "number", "textarea", "select", "checkbox", "list", "hidden"] = "text"
    required: bool = False
    readonly: bool = False
    multiple: bool = False
    placeholder: Optional[str] = None
    help: Optional[str] = None
    options: List[Tuple[str, str]] = Field(
        default_factory=list,
        description="(value, label) pairs for select fields"
    )
    min: Optional[int] = None
    max: Optional[int] = None
    default: Optional[Any] = None


class EntityManager(ABC):
    """Abstract interface for a config API entity

    Every entity shown by the console (device groups, slices, inventory,
    K4 keys, subscribers) implements this fixed method set so the modal
    and section routers can drive it by type tag alone.
    """

    type: str = ""
    display_name: str = ""

    @abstractmethod
    def load_data(self) -> List[Dict[str, Any]]:
        """Fetch and render the entity list

        Returns:
            Entity documents (empty on failure)
        """
        pass

    @abstractmethod
    def validate_form_data(self, data: Dict[str, Any], is_edit: bool = False) -> ValidationResult:
        """Run client-side checks on flat form input

        Args:
            data: Flat form values keyed by field id
            is_edit: Whether the form edits an existing item

        Returns:
            ValidationResult with human-readable errors
        """
        pass

    @abstractmethod
    def prepare_payload(self, form_data: Dict[str, Any], is_edit: bool = False) -> Dict[str, Any]:
        """Shape flat form input into the nested wire document

        Args:
            form_data: Flat form values keyed by field id
            is_edit: Whether the form edits an existing item

        Returns:
            JSON-serializable request body
        """
        pass

    @abstractmethod
    def from_response(self, raw: Any) -> Any:
        """Parse one decoded response document

        Args:
            raw: Decoded JSON value

        Returns:
            Typed document (or the raw mapping when untyped)
        """
        pass

    @abstractmethod
    def render(self, data: List[Dict[str, Any]]) -> str:
        """Render the entity list view"""
        pass

    @abstractmethod
    def get_form_fields(self, is_edit: bool = False) -> List[FormField]:
        """Describe the create/edit form"""
        pass
