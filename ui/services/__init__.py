"""Service layer for the console UI.

Services hold the API client and the framework-agnostic managers so UI
components can remain thin and focused on presentation.
"""

from .console_service import ConsoleService

__all__ = [
    "ConsoleService",
]
