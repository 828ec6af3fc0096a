from __future__ import annotations

"""Console service: wires settings, the API client and the page managers.

One `ConsoleService` is created per Streamlit session and kept in
`st.session_state`, so the rate matrix survives reruns while each browser
session still owns its own matrix.
"""

import logging
from typing import Optional

import requests

from ricemill_admin.api import ApiClient
from ricemill_admin.config import Settings
from ricemill_admin.ui_logic import DataManager, StateManager, WorkflowManager
from ricemill_admin.ui_logic.state_manager import ToastVariant
from ui.state import UIState

logger = logging.getLogger(__name__)


class ConsoleService:
    """Owns the collaborators for one bag-rates page session."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.client = ApiClient.from_settings(settings, session=session)
        self.ui_state = UIState()
        self.state_manager = StateManager()
        self.state_manager.add_listener("toast", self._on_toast)
        self.workflow = WorkflowManager(self.client, state_manager=self.state_manager)
        self.data = DataManager(self.client, crop_year_page_limit=settings.crop_year_page_limit)
        self.client.set_on_unauthorized(self._on_unauthorized)

    def _on_toast(self, message: str, variant: ToastVariant) -> None:
        self.ui_state.queue_toast(message, ToastVariant(variant).value)

    def _on_unauthorized(self) -> None:
        logger.warning("API rejected the configured token (401)")
        self.ui_state.queue_toast("Your session is not authorized. Check the API token.", ToastVariant.ERROR.value)

    def ensure_loaded(self) -> bool:
        """Load rates for the current selection unless this generation is already loaded.

        Returns True when a load was attempted.
        """
        state = self.workflow.state
        if not self.workflow.has_year_selected:
            return False
        if self.ui_state.loaded_generation == state.generation:
            return False
        outcome = self.workflow.load()
        if not outcome.discarded:
            self.ui_state.loaded_generation = state.generation
            self.ui_state.bump_editor()
        return True

    def refresh_master_data(self) -> None:
        self.data.refresh()
        self.ui_state.loaded_generation = None
