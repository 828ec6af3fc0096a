"""
Load, save and reset workflow for the bag-rates page.

All three operations follow the same shape:

- refuse to start while another operation is in flight
- validate locally, before any request
- call the API, letting `season_bag_rates` reconcile the wire shape
- on success, reseed the matrix from the server response (never from what
  was submitted) and clear dirtiness
- on failure, keep the user's cells untouched and surface a message both
  inline (`form_error`) and as a toast

Loads are ticketed. A ticket remembers the selection and matrix generation it
was issued for; a result arriving for an older ticket is discarded so it can
never overwrite the grid of a different crop year or season.

None of these methods raise for expected failures; they return an
`OperationOutcome` instead.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional
import logging

from ..api import ApiClient
from ..errors import MalformedResponse, RateValidationError, RequestFailed
from ..models import RiceType, SeasonBagRate, SeasonBagRateList, SeasonCode
from ..money import parse_decimal_or_null
from ..season_bag_rates import (
    build_upsert_payload,
    list_season_bag_rates,
    reset_season_bag_rates,
    upsert_season_bag_rates,
)
from .rate_matrix import RateMatrix
from .state_manager import BusyState, StateManager, ToastVariant, WorkflowPhase
from .validation_manager import ValidationManager

logger = logging.getLogger(__name__)

SAVE_FAILED = "Save failed."
RESET_FAILED = "Reset failed."
LOAD_FAILED = "Failed to load bag rates."
SAVE_SUCCEEDED = "Bag rates updated."
RESET_SUCCEEDED = "Bag rates reset to 0.00."
BUSY_MESSAGE = "Another bag-rate operation is still in progress."


@dataclass
class OperationOutcome:
    ok: bool
    message: str = ""
    items: List[SeasonBagRate] = field(default_factory=list)
    # True when a load finished for a selection that is no longer current
    discarded: bool = False


@dataclass(frozen=True)
class LoadTicket:
    crop_year_start_year: int
    season_code: SeasonCode
    generation: int


def _failure_message(err: Exception, fallback: str) -> str:
    message = getattr(err, "message", None) or str(err)
    return message or fallback


class WorkflowManager:
    """Drives one bag-rates page against the API."""

    def __init__(
        self,
        client: ApiClient,
        state_manager: Optional[StateManager] = None,
        validation_manager: Optional[ValidationManager] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.client = client
        self.state_manager = state_manager or StateManager()
        self.validation_manager = validation_manager or ValidationManager()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def state(self):
        return self.state_manager.get_state()

    # --- selection and inputs ---

    def _discard_matrix(self) -> None:
        s = self.state
        s.generation += 1
        s.matrix = RateMatrix(s.active_codes)
        s.load_error = None
        if s.busy is BusyState.LOADING:
            # The superseded load keeps running but its result will be ignored
            s.busy = BusyState.IDLE

    def select(self, crop_year_start_year: Optional[int], season_code: SeasonCode) -> bool:
        """Change the crop year/season. Returns True when the selection changed."""
        s = self.state
        season = SeasonCode(season_code)
        if (crop_year_start_year, season) == s.selection.key:
            return False
        s.selection.crop_year_start_year = crop_year_start_year
        s.selection.season_code = season
        s.form_error = None
        s.last_saved_at = None
        self.close_reset()
        self._discard_matrix()
        logger.info("Selected crop year %s, season %s", crop_year_start_year, season.value)
        return True

    def set_rice_types(self, rice_types: Iterable[RiceType]) -> None:
        """Replace the active rice types; inactive entries and repeated codes are dropped."""
        active: List[RiceType] = []
        seen = set()
        for rt in rice_types:
            if not rt.is_active or rt.code in seen:
                continue
            seen.add(rt.code)
            active.append(rt)
        s = self.state
        if [rt.code for rt in active] == s.active_codes and active == s.rice_types:
            return
        s.rice_types = active
        s.form_error = None
        self._discard_matrix()

    def edit_base(self, rice_type_code: str, raw_value: str) -> None:
        self.state.matrix.on_base_edit(rice_type_code, raw_value)

    # --- availability ---

    @property
    def has_year_selected(self) -> bool:
        return isinstance(self.state.selection.crop_year_start_year, int)

    @property
    def can_save(self) -> bool:
        s = self.state
        return (
            s.busy is BusyState.IDLE
            and self.has_year_selected
            and len(s.rice_types) > 0
            and s.matrix.is_dirty
        )

    @property
    def can_open_reset(self) -> bool:
        s = self.state
        return s.busy is BusyState.IDLE and len(s.rice_types) > 0

    @property
    def can_confirm_reset(self) -> bool:
        s = self.state
        if s.busy is not BusyState.IDLE:
            return False
        return self.validation_manager.validate_reset(
            s.reset_dialog.confirm_text,
            s.selection.crop_year_start_year,
            len(s.rice_types),
        ).is_valid

    @property
    def status_message(self) -> Optional[str]:
        s = self.state
        if s.form_error:
            return s.form_error
        if not s.rice_types:
            return None
        if s.matrix.is_dirty:
            return "Unsaved changes."
        if s.last_saved_at is not None:
            return "All changes saved."
        return "No changes."

    # --- load ---

    def begin_load(self) -> Optional[LoadTicket]:
        s = self.state
        if not self.has_year_selected:
            return None
        if s.busy in (BusyState.SAVING, BusyState.RESETTING):
            return None
        s.busy = BusyState.LOADING
        s.load_error = None
        return LoadTicket(
            crop_year_start_year=s.selection.crop_year_start_year,
            season_code=s.selection.season_code,
            generation=s.generation,
        )

    def _is_current(self, ticket: LoadTicket) -> bool:
        s = self.state
        return (
            ticket.generation == s.generation
            and (ticket.crop_year_start_year, ticket.season_code) == s.selection.key
        )

    def complete_load(self, ticket: LoadTicket, result: SeasonBagRateList) -> OperationOutcome:
        if not self._is_current(ticket):
            logger.debug("Discarding stale bag-rate load for %s %s", ticket.crop_year_start_year, ticket.season_code.value)
            return OperationOutcome(ok=False, discarded=True)
        s = self.state
        s.matrix.reseed(result.items, s.active_codes)
        s.busy = BusyState.IDLE
        s.form_error = None
        return OperationOutcome(ok=True, message=result.message or "", items=result.items)

    def fail_load(self, ticket: LoadTicket, message: str) -> OperationOutcome:
        if not self._is_current(ticket):
            return OperationOutcome(ok=False, message=message, discarded=True)
        s = self.state
        s.busy = BusyState.IDLE
        s.load_error = message
        return OperationOutcome(ok=False, message=message)

    def load(self) -> OperationOutcome:
        """Fetch the rates for the current selection and seed the matrix."""
        ticket = self.begin_load()
        if ticket is None:
            return OperationOutcome(ok=False, message="Select a crop year." if not self.has_year_selected else BUSY_MESSAGE)
        try:
            result = list_season_bag_rates(self.client, ticket.crop_year_start_year, ticket.season_code)
        except (MalformedResponse, RequestFailed) as e:
            message = _failure_message(e, LOAD_FAILED)
            logger.error("Loading bag rates failed: %s", message)
            return self.fail_load(ticket, message)
        except Exception:
            self.fail_load(ticket, LOAD_FAILED)
            raise
        return self.complete_load(ticket, result)

    # --- save ---

    def _fail(self, message: str) -> OperationOutcome:
        self.state.form_error = message
        self.state_manager.set_phase(WorkflowPhase.FAILED)
        self.state_manager.show_toast(message, ToastVariant.ERROR)
        return OperationOutcome(ok=False, message=message)

    def _succeed(self, result: SeasonBagRateList, default_message: str) -> OperationOutcome:
        s = self.state
        s.matrix.reseed(result.items, s.active_codes)
        s.form_error = None
        s.last_saved_at = self._clock()
        message = result.message or default_message
        self.state_manager.set_phase(WorkflowPhase.SUCCEEDED)
        self.state_manager.show_toast(message, ToastVariant.SUCCESS)
        return OperationOutcome(ok=True, message=message, items=result.items)

    def _finish(self) -> None:
        self.state.busy = BusyState.IDLE
        self.state_manager.set_phase(WorkflowPhase.IDLE)

    def save(self) -> OperationOutcome:
        """Validate the matrix and write it; the grid is kept intact on failure."""
        s = self.state
        if s.busy is not BusyState.IDLE:
            return OperationOutcome(ok=False, message=BUSY_MESSAGE)

        s.form_error = None
        self.state_manager.set_phase(WorkflowPhase.VALIDATING)
        try:
            result = self.validation_manager.validate_save(
                s.selection.crop_year_start_year, s.matrix, s.active_codes
            )
            if not result.is_valid:
                return self._fail(result.first_message or SAVE_FAILED)

            rows = []
            for code, cells in s.matrix.cells_in_order():
                rows.append((code, {size: parse_decimal_or_null(raw) for size, raw in cells.items()}))

            s.busy = BusyState.SAVING
            self.state_manager.set_phase(WorkflowPhase.SUBMITTING)
            try:
                payload = build_upsert_payload(s.selection.crop_year_start_year, s.selection.season_code, rows)
                response = upsert_season_bag_rates(self.client, payload)
            except (RateValidationError, MalformedResponse, RequestFailed) as e:
                message = _failure_message(e, SAVE_FAILED)
                logger.error("Saving bag rates failed: %s", message)
                return self._fail(message)
            return self._succeed(response, SAVE_SUCCEEDED)
        finally:
            self._finish()

    # --- reset ---

    def open_reset(self) -> bool:
        if not self.can_open_reset:
            return False
        self.state.reset_dialog.is_open = True
        return True

    def close_reset(self) -> None:
        """Close the confirmation panel; the typed text never survives a close."""
        self.state.reset_dialog.is_open = False
        self.state.reset_dialog.confirm_text = ""

    def set_reset_text(self, text: str) -> None:
        self.state.reset_dialog.confirm_text = text

    def reset(self, confirm_text: Optional[str] = None) -> OperationOutcome:
        """Zero all rates for the selection once the typed confirmation matches."""
        s = self.state
        if s.busy is not BusyState.IDLE:
            return OperationOutcome(ok=False, message=BUSY_MESSAGE)
        if confirm_text is not None:
            s.reset_dialog.confirm_text = confirm_text

        s.form_error = None
        self.state_manager.set_phase(WorkflowPhase.VALIDATING)
        try:
            gate = self.validation_manager.validate_reset(
                s.reset_dialog.confirm_text,
                s.selection.crop_year_start_year,
                len(s.rice_types),
            )
            if not gate.is_valid:
                return self._fail(gate.first_message or RESET_FAILED)

            s.busy = BusyState.RESETTING
            self.state_manager.set_phase(WorkflowPhase.SUBMITTING)
            try:
                response = reset_season_bag_rates(
                    self.client,
                    s.selection.crop_year_start_year,
                    s.selection.season_code,
                    s.reset_dialog.confirm_text,
                )
            except (RateValidationError, MalformedResponse, RequestFailed) as e:
                message = _failure_message(e, RESET_FAILED)
                logger.error("Resetting bag rates failed: %s", message)
                return self._fail(message)
            outcome = self._succeed(response, RESET_SUCCEEDED)
            self.close_reset()
            return outcome
        finally:
            self._finish()
