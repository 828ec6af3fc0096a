"""
Rice-mill back office console: bag rates.

Run with `streamlit run ui/app.py`. Settings come from `config/settings.yaml`
and `RICEMILL_*` environment variables.
"""

from pathlib import Path
import sys
import streamlit as st

# Ensure project root is on sys.path to enable package imports
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from ricemill_admin.config import load_settings
from ricemill_admin.io_paths import LOGS_DIR
from ricemill_admin.utils_logging import configure_logging
from ui.services import ConsoleService
from ui.components.bag_rates_tab import render_bag_rates_tab
from ui.utils.helpers import show_toast


st.set_page_config(page_title="Rice Mill Admin", page_icon="🌾", layout="wide", initial_sidebar_state="collapsed")


def main() -> None:
    # Initialize the per-session service once; it owns the rate matrix across reruns
    if "console_service" not in st.session_state:
        settings = load_settings()
        configure_logging(LOGS_DIR, debug=settings.debug)
        st.session_state["console_service"] = ConsoleService(settings)
    service: ConsoleService = st.session_state["console_service"]

    for message, variant in service.ui_state.drain_toasts():
        show_toast(message, variant)

    st.title("🌾 Rice Mill Admin")
    st.caption(f"Master data · API {service.settings.api_url('/')}")

    with st.sidebar:
        if st.button("Reload master data", key="reload_master_data"):
            service.refresh_master_data()
            st.rerun()

    render_bag_rates_tab(service)


if __name__ == "__main__":
    main()
