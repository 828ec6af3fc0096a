from __future__ import annotations

"""General-purpose helpers for the UI."""

from typing import Dict

import streamlit as st

_TOAST_ICONS: Dict[str, str] = {
    "success": "✅",
    "error": "⚠️",
    "info": "ℹ️",
}


def show_toast(message: str, variant: str = "info") -> None:
    """Render a transient notification for a toast variant."""
    key = getattr(variant, "value", variant)
    st.toast(message, icon=_TOAST_ICONS.get(key, _TOAST_ICONS["info"]))
