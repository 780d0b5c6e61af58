# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""Section navigation: section name -> manager -> load_data()"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from consolectl.constants import DETAIL_SECTIONS, SECTIONS

from webconsole.core.managers.base_manager import BaseManager

if TYPE_CHECKING:
    from webconsole.core.context import AppContext

logger = logging.getLogger(__name__)


class UIManager:
    """Tracks the visible section and loads its manager's data."""

    def __init__(self, ctx: "AppContext", sections: Optional[Dict[str, str]] = None):
        self.ctx = ctx
        self.sections = dict(sections or SECTIONS)

    def get_section_manager(self, section: str) -> Optional[BaseManager]:
        manager_key = self.sections.get(section)
        return self.ctx.managers.get(manager_key) if manager_key else None

    def show_section(self, section: str) -> Optional[List[Dict[str, Any]]]:
        """
        Make a section current and load its data.

        Detail sections show what show_details() already loaded and are
        not reloaded.

        Raises:
            ValueError: If the section is unknown.
        """
        if section not in self.sections:
            raise ValueError(f"Unknown section: {section}")

        logger.debug(f"Showing section {section}")
        self.ctx.current_section = section
        return self.load_section_data(section)

    def load_section_data(self, section: str) -> Optional[List[Dict[str, Any]]]:
        if section in DETAIL_SECTIONS:
            return None
        manager = self.get_section_manager(section)
        if manager is None:
            logger.warning(f"No manager registered for section {section}")
            return None
        return manager.load_data()

    def refresh(self) -> Optional[List[Dict[str, Any]]]:
        """Reload the current section."""
        return self.load_section_data(self.ctx.current_section)

    def view(self, section: Optional[str] = None) -> str:
        """Rendered view of a section (the details view for detail sections)."""
        section = section or self.ctx.current_section
        manager = self.get_section_manager(section)
        if manager is None:
            return ""
        if section in DETAIL_SECTIONS:
            return manager.details_view
        return manager.view
