"""
Console Service for the Web Console backend.

Provides the console actions over a shared AppContext and shapes their
outcomes into JSON-ready dictionaries.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from consolectl.constants import SECTIONS
from consolectl.http_client import ConfigAPIClient, ConsoleClientError

from webconsole.core import handlers
from webconsole.core.abstract import Result
from webconsole.core.context import AppContext, create_context

from ..config import settings

logger = logging.getLogger(__name__)


class ConsoleService:
    """Service layer for console operations."""

    def __init__(self, ctx: Optional[AppContext] = None):
        """
        Initialize the service.

        Args:
            ctx: Optional console context. Built from settings if not provided.
        """
        self._ctx = ctx

    @property
    def ctx(self) -> AppContext:
        """Get the console context, creating if needed."""
        if self._ctx is None:
            client = ConfigAPIClient(
                config_url=settings.config_api_url,
                subscriber_url=settings.subscriber_api_url,
                ssm_url=settings.ssm_api_url,
                timeout=settings.api_timeout,
            )
            self._ctx = create_context(client=client, max_workers=settings.detail_fetch_workers)
        return self._ctx

    def _timestamp(self) -> str:
        """Get current timestamp string."""
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    def _result(self, result: Result) -> Dict[str, Any]:
        response = result.model_dump()
        response["timestamp"] = self._timestamp()
        return response

    async def list_section(self, section: str) -> Dict[str, Any]:
        """
        Load a section.

        Returns:
            Dictionary with items, rendered view and (for subscribers) paging
            metadata, or an error entry.
        """
        result = handlers.show_section(self.ctx, section)
        if not result.success:
            return {"error": result.error, "section": section, "timestamp": self._timestamp()}

        items = result.data.get("items") or []
        response: Dict[str, Any] = {
            "timestamp": self._timestamp(),
            "section": section,
            "total": len(items),
            "items": items,
            "view": result.message,
        }
        if SECTIONS.get(section) == "subscriber_list_manager":
            response["meta"] = self.ctx.subscriber_list_manager.list_meta.model_dump()
        return response

    async def list_subscribers(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        q: str = "",
        ue_id: str = "",
        plmn_id: str = ""
    ) -> Dict[str, Any]:
        """Load one page of subscribers with the given filters."""
        manager = self.ctx.subscriber_list_manager
        manager.set_list_state(
            q=q,
            ueId=ue_id,
            plmnID=plmn_id,
            limit=limit or manager.list_state.limit
        )
        result = handlers.go_to_page(self.ctx, page)
        if not result.success:
            return {"error": result.error, "timestamp": self._timestamp()}

        return {
            "timestamp": self._timestamp(),
            "total": result.data["meta"]["total"],
            "items": result.data["items"],
            "meta": result.data["meta"],
        }

    async def get_item(self, type: str, item_id: str) -> Dict[str, Any]:
        """
        Get one entity document.

        Returns:
            Entity details or error.
        """
        manager = self.ctx.modal_manager.get_manager_by_type(type)
        if manager is None:
            return {"success": False, "error": f"Unknown type: {type}"}

        try:
            document = manager.get_item(item_id)
        except ConsoleClientError as e:
            logger.error(f"Error getting {type} {item_id}: {e}")
            return {"success": False, "error": str(e)}

        return {"success": True, "type": type, "id": item_id, "data": document}

    async def get_form(self, type: str, item_id: Optional[str] = None) -> Dict[str, Any]:
        """Describe the create form, or the edit form with current values."""
        modal = self.ctx.modal_manager
        if item_id:
            result = handlers.edit_item(self.ctx, type, item_id)
        else:
            result = handlers.show_create_form(self.ctx, type)

        response: Dict[str, Any] = {"success": result.success, "type": type}
        if result.success:
            response.update({
                "title": modal.title,
                "is_edit": modal.is_edit,
                "fields": [f.model_dump() for f in modal.fields],
                "values": dict(modal.values),
            })
        else:
            response["error"] = result.error
        modal.hide()
        return response

    async def create_item(self, type: str, form_data: Dict[str, Any]) -> Dict[str, Any]:
        opened = handlers.show_create_form(self.ctx, type)
        if not opened.success:
            return self._result(opened)
        result = handlers.save_item(self.ctx, form_data)
        self.ctx.modal_manager.hide()
        return self._result(result)

    async def update_item(self, type: str, item_id: str, form_data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an item; fields missing from form_data keep their stored values."""
        opened = handlers.edit_item(self.ctx, type, item_id)
        if not opened.success:
            self.ctx.modal_manager.hide()
            return self._result(opened)
        merged = {**self.ctx.modal_manager.values, **form_data}
        result = handlers.save_item(self.ctx, merged)
        self.ctx.modal_manager.hide()
        return self._result(result)

    async def delete_item(self, type: str, item_id: str) -> Dict[str, Any]:
        return self._result(handlers.delete_item(self.ctx, type, item_id))

    async def delete_k4_key(self, k4_sno: int, key_label: str) -> Dict[str, Any]:
        return self._result(handlers.delete_k4_item(self.ctx, k4_sno, key_label))

    async def run_admin_action(self, action: str) -> Dict[str, Any]:
        """
        Run a sync-ssm admin action.

        Raises:
            ValueError: If the action is unknown.
        """
        result = handlers.run_admin_action(self.ctx, action)
        response = result.model_dump()
        response["timestamp"] = self._timestamp()
        return response

    async def get_notifications(self, drain: bool = False) -> List[Dict[str, Any]]:
        notifications = self.ctx.notifications
        items = notifications.drain() if drain else notifications.history
        return [n.model_dump() for n in items]


# Singleton service instance
_service_instance: Optional[ConsoleService] = None


def get_console_service() -> ConsoleService:
    """Get or create the singleton service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = ConsoleService()
    return _service_instance
