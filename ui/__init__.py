"""Streamlit console for rice-mill bag rates.

`ui/app.py` is the entry point; components and the per-session service are
imported as `ui.components` / `ui.services`, so this directory must stay a
regular package for `streamlit run` and pytest alike.
"""
