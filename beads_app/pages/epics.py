"""Epics page: progress per epic with an expandable child list."""

from __future__ import annotations

import streamlit as st

from beads_app.app import register_page
from beads_app.core.errors import DashboardError
from beads_app.core.service import IssueService
from beads_app.visual.tables import render_issue_table


@register_page("Epics")
def epics_page():
    st.title("Epics")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    try:
        epics = service.epics()
    except DashboardError as exc:
        st.error(str(exc))
        return
    if not epics:
        st.info("No epics found.")
        return

    focus = st.selectbox("Focus epic", ["All"] + [e.issue.id for e in epics])
    if focus != "All":
        try:
            epics = [service.epic_detail(focus)]
        except DashboardError as exc:
            st.error(str(exc))
            return

    for epic in epics:
        label = f"{epic.issue.id} · {epic.issue.title} ({epic.closed}/{epic.total}, {epic.percent:.0f}%)"
        with st.expander(label, expanded=focus != "All"):
            st.progress(min(epic.percent / 100.0, 1.0))
            render_issue_table(epic.children)
