"""
Dependencies for API routes.

Provides shared dependencies like service instances and configuration.
"""

from ..services.console_service import get_console_service, ConsoleService


def get_service() -> ConsoleService:
    """
    Dependency that provides the console service instance.

    Returns:
        ConsoleService: Singleton service instance
    """
    return get_console_service()
