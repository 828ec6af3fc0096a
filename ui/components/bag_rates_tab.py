from __future__ import annotations

import streamlit as st
import pandas as pd

from .base_component import BaseComponent
from .reset_panel import render_reset_panel
from ricemill_admin.models import BAG_SIZES, DISPLAY_SIZES, BagSize, SEASONS, SeasonCode
from ricemill_admin.money import format_bag_size_label
from ricemill_admin.ui_logic.state_manager import BusyState
from ui.services import ConsoleService

RICE_TYPE_COL = "Rice Type"
RATE_COLUMNS = {size: f"{format_bag_size_label(size)} Rate" for size in BAG_SIZES}


class BagRatesTab(BaseComponent):
    """Bag rates for one crop year and season.

    Only the 100 kg column is editable; the 75 kg and 40 kg columns are
    recomputed from it after every edit. Save writes the whole table; Reset
    zeroes it after a typed confirmation.
    """

    service: ConsoleService

    def render(self) -> None:
        st.header("Bag Rates")
        st.caption("Set bag rates for each rice type and bag size. Rates are stored in rupees.")

        workflow = self.service.workflow
        data = self.service.data

        ok_years, years_error, _ = data.load_crop_years()
        ok_types, types_error, rice_types = data.load_rice_types()
        if not ok_years:
            st.error(years_error)
        if not ok_types:
            st.error(types_error)
        workflow.set_rice_types(rice_types)

        state = workflow.state
        if state.selection.crop_year_start_year is None and data.default_crop_year() is not None:
            workflow.select(data.default_crop_year(), state.selection.season_code)

        self._render_selectors()

        st.caption("Enter the 100kg rate. The 75kg and 40kg rates will be calculated automatically.")

        if not state.rice_types:
            st.info("No active rice types found. Create rice types first.")
        elif state.load_error:
            st.error(state.load_error)
        else:
            self._render_table()

        st.divider()
        self._render_footer()
        render_reset_panel(self.service)

    def _render_selectors(self) -> None:
        workflow = self.service.workflow
        data = self.service.data
        selection = workflow.state.selection
        years = data.crop_year_options()

        col1, col2 = st.columns(2)
        with col1:
            if years:
                index = years.index(selection.crop_year_start_year) if selection.crop_year_start_year in years else 0
                year = st.selectbox(
                    "Crop year",
                    options=years,
                    index=index,
                    format_func=data.label_for,
                    key="bag_rates_crop_year",
                )
            else:
                st.selectbox("Crop year", options=[], key="bag_rates_crop_year_empty")
                year = None
        with col2:
            season = st.selectbox(
                "Season",
                options=SEASONS,
                index=SEASONS.index(selection.season_code),
                format_func=lambda s: SeasonCode(s).label,
                key="bag_rates_season",
            )
        workflow.select(year, season)
        # A selection change creates a new matrix generation; load it on this run
        self.service.ensure_loaded()

    def _build_frame(self) -> pd.DataFrame:
        state = self.service.workflow.state
        rows = []
        for rt in state.rice_types:
            row = {RICE_TYPE_COL: rt.name}
            for size in DISPLAY_SIZES:
                row[RATE_COLUMNS[size]] = state.matrix.cell(rt.code, size)
            rows.append(row)
        df = pd.DataFrame(rows, index=[rt.code for rt in state.rice_types], columns=[RICE_TYPE_COL] + [RATE_COLUMNS[s] for s in DISPLAY_SIZES])
        df.index.name = "Code"
        return df

    def _render_table(self) -> None:
        workflow = self.service.workflow
        ui_state = self.service.ui_state
        if workflow.state.busy is BusyState.LOADING:
            st.caption("Loading…")

        base_col = RATE_COLUMNS[BagSize.KG_100]
        edited = st.data_editor(
            self._build_frame(),
            use_container_width=True,
            num_rows="fixed",
            disabled=[RICE_TYPE_COL, RATE_COLUMNS[BagSize.KG_75], RATE_COLUMNS[BagSize.KG_40]],
            column_config={
                base_col: st.column_config.TextColumn(base_col, help="₹ per 100 kg bag"),
                RATE_COLUMNS[BagSize.KG_75]: st.column_config.TextColumn(RATE_COLUMNS[BagSize.KG_75], help="75% of the 100 kg rate"),
                RATE_COLUMNS[BagSize.KG_40]: st.column_config.TextColumn(RATE_COLUMNS[BagSize.KG_40], help="40% of the 100 kg rate"),
            },
            key=f"bag_rates_editor_{ui_state.editor_revision}",
        )

        changed = False
        for code in workflow.state.active_codes:
            raw = edited.at[code, base_col]
            value = "" if raw is None or (isinstance(raw, float) and pd.isna(raw)) else str(raw)
            if value != workflow.state.matrix.cell(code, BagSize.KG_100):
                workflow.edit_base(code, value)
                changed = True
        if changed:
            # Redraw so the derived columns show the recomputed values
            ui_state.bump_editor()
            st.rerun()

    def _render_footer(self) -> None:
        workflow = self.service.workflow
        ui_state = self.service.ui_state
        state = workflow.state

        col_status, col_reset, col_save = st.columns([3, 1, 1])
        with col_status:
            message = workflow.status_message
            if state.form_error:
                st.error(message)
            elif message:
                st.caption(message)
        with col_reset:
            if st.button("Reset", key="bag_rates_open_reset", disabled=not workflow.can_open_reset, use_container_width=True):
                workflow.open_reset()
                st.rerun()
        with col_save:
            label = "Saving…" if state.busy is BusyState.SAVING else "Save changes"
            if st.button(label, type="primary", key="bag_rates_save", disabled=not workflow.can_save, use_container_width=True):
                outcome = workflow.save()
                if outcome.ok:
                    ui_state.bump_editor()
                st.rerun()


def render_bag_rates_tab(service: ConsoleService) -> None:
    BagRatesTab(service).render()
