"""
Framework-agnostic state for the bag-rates page.

`BagRatesState` is the single owned value for one mounted page: the current
selection, the active rice types, the rate matrix, busy/phase markers and the
reset confirmation panel. It is replaced piecewise by `WorkflowManager`, never
shared globally.

`StateManager` adds a small listener mechanism so any UI framework can react
to notifications ("toast") and workflow phase changes ("phase_changed").
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional
import logging

from ..models import RiceType, SeasonCode
from .rate_matrix import RateMatrix

logger = logging.getLogger(__name__)


class BusyState(Enum):
    """Mutually exclusive in-flight operations."""
    IDLE = "idle"
    LOADING = "loading"
    SAVING = "saving"
    RESETTING = "resetting"


class WorkflowPhase(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ToastVariant(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Selection:
    """Crop year (by start year) and season being priced."""
    crop_year_start_year: Optional[int] = None
    season_code: SeasonCode = SeasonCode.KHARIF

    @property
    def key(self) -> tuple:
        return (self.crop_year_start_year, self.season_code)


@dataclass
class ResetDialogState:
    is_open: bool = False
    confirm_text: str = ""


@dataclass
class BagRatesState:
    """Aggregate state for one bag-rates page."""
    selection: Selection = field(default_factory=Selection)
    rice_types: List[RiceType] = field(default_factory=list)
    matrix: RateMatrix = field(default_factory=RateMatrix)
    busy: BusyState = BusyState.IDLE
    phase: WorkflowPhase = WorkflowPhase.IDLE
    last_outcome: Optional[WorkflowPhase] = None
    form_error: Optional[str] = None
    load_error: Optional[str] = None
    last_saved_at: Optional[datetime] = None
    reset_dialog: ResetDialogState = field(default_factory=ResetDialogState)
    # Bumped whenever the matrix is discarded; used to ignore stale loads
    generation: int = 0

    @property
    def active_codes(self) -> List[str]:
        return [rt.code for rt in self.rice_types]


class StateManager:
    """Owns a `BagRatesState` and dispatches events to listeners."""

    def __init__(self, state: Optional[BagRatesState] = None):
        self._state = state or BagRatesState()
        self._listeners: Dict[str, List[Callable]] = {}

    def get_state(self) -> BagRatesState:
        return self._state

    def set_phase(self, phase: WorkflowPhase) -> None:
        previous = self._state.phase
        self._state.phase = phase
        if phase in (WorkflowPhase.SUCCEEDED, WorkflowPhase.FAILED):
            self._state.last_outcome = phase
        self._notify_listeners("phase_changed", previous, phase)

    def show_toast(self, message: str, variant: ToastVariant = ToastVariant.INFO) -> None:
        """Publish a transient notification to whatever surface is listening."""
        logger.info("Toast (%s): %s", ToastVariant(variant).value, message)
        self._notify_listeners("toast", message, ToastVariant(variant))

    def add_listener(self, event: str, callback: Callable) -> None:
        """Add a listener for an event ("toast" or "phase_changed")."""
        if event not in self._listeners:
            self._listeners[event] = []
        self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Callable) -> None:
        if event in self._listeners:
            try:
                self._listeners[event].remove(callback)
            except ValueError:
                pass

    def _notify_listeners(self, event: str, *args, **kwargs) -> None:
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in state listener callback for '{event}': {e}")
