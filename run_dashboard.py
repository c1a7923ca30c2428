"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``beads_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from beads_app.app import main
from beads_app.core.config import load_settings

st.set_page_config(layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def _auto_init_issue_service():
    """Initialize the beads service from settings if ``bd`` answers."""
    if "settings" not in st.session_state:
        st.session_state["settings"] = load_settings()
    if "issue_service" in st.session_state:
        return

    settings = st.session_state["settings"]
    from beads_app.core.beads_client import BeadsCLI
    from beads_app.core.errors import DashboardError
    from beads_app.core.service import IssueService

    client = BeadsCLI(settings.bd_bin)
    try:
        client.list_issues()
    except DashboardError as e:
        st.sidebar.warning(f"`{settings.bd_bin}` not usable yet ({e}). Please use the Setup page.")
        return
    st.session_state["bd_bin"] = settings.bd_bin
    st.session_state["issue_service"] = IssueService(
        client,
        timezone=settings.timezone,
        trend_window_days=settings.trend_window_days,
    )


_auto_init_issue_service()

PAGES_DIR = Path(__file__).parent / "beads_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"beads_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
