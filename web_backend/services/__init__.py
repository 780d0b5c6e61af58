"""Services package for the Web Console backend."""

from .console_service import ConsoleService, get_console_service

__all__ = ["ConsoleService", "get_console_service"]
