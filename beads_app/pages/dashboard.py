"""Landing page: project counts, open epics and current work."""

from __future__ import annotations

import streamlit as st

from beads_app.app import register_page
from beads_app.core.errors import DashboardError
from beads_app.core.service import IssueService
from beads_app.visual.tables import render_issue_table


@register_page("Dashboard")
def dashboard_page():
    st.title("Dashboard")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    try:
        data = service.landing()
    except DashboardError as exc:
        st.error(str(exc))
        return

    stats = data.stats
    cols = st.columns(5)
    cols[0].metric("Total", stats.total)
    cols[1].metric("Open", stats.open)
    cols[2].metric("In Progress", stats.in_progress)
    cols[3].metric("Blocked", stats.blocked)
    cols[4].metric("Closed", stats.closed)

    st.subheader("Open epics")
    if not data.epics:
        st.caption("No open epics.")
    for epic in data.epics:
        st.write(f"**{epic.issue.id}** {epic.issue.title}  ({epic.closed}/{epic.total})")
        st.progress(min(epic.percent / 100.0, 1.0))

    left, right = st.columns(2)
    with left:
        st.subheader("Blocked")
        render_issue_table(data.blocked)
    with right:
        st.subheader("In progress")
        render_issue_table(data.in_progress)
