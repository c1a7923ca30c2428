"""Dependency graph page: blockers above the work they block."""

from __future__ import annotations

import streamlit as st

from beads_app.app import register_page
from beads_app.core.errors import DashboardError
from beads_app.core.service import IssueService
from beads_app.visual.graph import dependency_graph_chart


@register_page("Dependency Graph")
def graph_page():
    st.title("Dependency Graph")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    try:
        layout = service.graph_layout()
    except DashboardError as exc:
        st.error(str(exc))
        return

    chart = dependency_graph_chart(layout)
    if chart is None:
        st.info("No active issues to plot.")
        return
    st.caption(f"{len(layout.nodes)} issue(s), {len(layout.edges)} edge(s) across {max(layout.levels.values()) + 1} level(s).")
    if layout.cyclic_ids:
        st.warning(f"Dependency cycle detected: {', '.join(sorted(layout.cyclic_ids))}")
    st.altair_chart(chart, use_container_width=False)
