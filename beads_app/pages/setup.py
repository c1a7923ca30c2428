"""Connection setup page: pick the ``bd`` binary and initialize IssueService."""

from __future__ import annotations

import shutil

import streamlit as st

from beads_app.app import register_page
from beads_app.core.beads_client import BeadsCLI
from beads_app.core.config import load_settings
from beads_app.core.errors import DashboardError
from beads_app.core.service import IssueService


@register_page("Setup / Connection")
def setup_page():
    st.title("Beads Connection Setup")
    st.caption("The dashboard reads issues by running the `bd` CLI in the working directory.")

    settings = st.session_state.get("settings") or load_settings()
    bd_bin = st.text_input(
        "bd executable",
        value=st.session_state.get("bd_bin") or settings.bd_bin,
        help="Defaults to BD_BIN from the environment or dashboard.yaml.",
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        if not bd_bin:
            st.error("The bd executable is required.")
            return
        if shutil.which(bd_bin) is None:
            st.warning(f"`{bd_bin}` was not found on PATH; trying anyway.")
        client = BeadsCLI(bd_bin)
        try:
            count = len(client.list_issues())
        except DashboardError as exc:
            st.error(f"Failed to read issues: {exc}")
            return
        st.session_state["bd_bin"] = bd_bin
        st.session_state["issue_service"] = IssueService(
            client,
            timezone=settings.timezone,
            trend_window_days=settings.trend_window_days,
        )
        st.success(f"Connection initialized ({count} issues).")

    if "issue_service" in st.session_state:
        st.info("IssueService ready.")
