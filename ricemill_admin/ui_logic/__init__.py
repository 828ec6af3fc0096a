"""
Framework-agnostic logic for the bag-rates page.

Nothing in this package imports a UI framework. The Streamlit page and the
command-line runner both drive the same managers:

- RateMatrix: editable rate cells plus the last-saved snapshot
- StateManager: page state and notification listeners
- ValidationManager: pre-network checks for save and reset
- WorkflowManager: load, save and reset against the API
- DataManager: crop years and active rice types
"""

from .rate_matrix import RateMatrix
from .state_manager import StateManager
from .validation_manager import ValidationManager
from .workflow_manager import WorkflowManager
from .data_manager import DataManager

__all__ = [
    "RateMatrix",
    "StateManager",
    "ValidationManager",
    "WorkflowManager",
    "DataManager",
]
