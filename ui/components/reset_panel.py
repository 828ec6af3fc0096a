from __future__ import annotations

import streamlit as st

from .base_component import BaseComponent
from ricemill_admin.season_bag_rates import RESET_CONFIRMATION_TOKEN
from ricemill_admin.ui_logic.state_manager import BusyState
from ui.services import ConsoleService


class ResetPanel(BaseComponent):
    """Confirmation panel for zeroing every bag rate of the selection.

    The destructive button stays disabled until the typed text is exactly
    RESET. Closing the panel, by Cancel or after a successful reset, discards
    the typed text.
    """

    service: ConsoleService

    def render(self) -> None:
        workflow = self.service.workflow
        ui_state = self.service.ui_state
        dialog = workflow.state.reset_dialog
        if not dialog.is_open:
            return

        with st.container(border=True):
            st.subheader("Reset bag rates?")
            st.write(
                "This will set all bag rates to 0.00 for the selected crop year and season. "
                "This is an admin-only action."
            )
            typed = st.text_input(
                f"Type {RESET_CONFIRMATION_TOKEN} to confirm",
                value=dialog.confirm_text,
                placeholder=RESET_CONFIRMATION_TOKEN,
                key=f"bag_rates_reset_confirm_{ui_state.reset_input_revision}",
            )
            workflow.set_reset_text(typed)

            col_cancel, col_reset = st.columns(2)
            with col_cancel:
                if st.button("Cancel", key="bag_rates_reset_cancel", use_container_width=True):
                    self._close()
                    st.rerun()
            with col_reset:
                label = "Resetting…" if workflow.state.busy is BusyState.RESETTING else "Reset to zero"
                if st.button(
                    label,
                    type="primary",
                    key="bag_rates_reset_confirm_btn",
                    disabled=not workflow.can_confirm_reset,
                    use_container_width=True,
                ):
                    outcome = workflow.reset()
                    if outcome.ok:
                        ui_state.reset_input_revision += 1
                        ui_state.bump_editor()
                    st.rerun()

    def _close(self) -> None:
        self.service.workflow.close_reset()
        self.service.ui_state.reset_input_revision += 1


def render_reset_panel(service: ConsoleService) -> None:
    ResetPanel(service).render()
