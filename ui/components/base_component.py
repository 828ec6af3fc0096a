from __future__ import annotations

"""Base class for console components.

A component gets the session's `ConsoleService` and reads or changes page
state only through its managers; Streamlit calls stay inside `render()`.
"""

from dataclasses import dataclass


@dataclass
class BaseComponent:
    service: object

    def render(self) -> None:
        raise NotImplementedError("Subclasses must implement render()")
