"""Tasks page: indented hierarchy of every active issue plus a detail drill-down."""

from __future__ import annotations

import streamlit as st

from beads_app.app import register_page
from beads_app.core.errors import DashboardError
from beads_app.core.service import IssueService
from beads_app.visual.tables import render_tree


def _render_detail(service: IssueService, issue_id: str):
    try:
        detail = service.task_detail(issue_id)
    except DashboardError as exc:
        st.error(str(exc))
        return
    task = detail.task.issue
    st.subheader(f"{task.id}: {task.title}")
    meta = st.columns(4)
    meta[0].metric("Status", task.status.label)
    meta[1].metric("Type", task.issue_type.label)
    meta[2].metric("Children", detail.task.total)
    meta[3].metric("Done", f"{detail.task.percent:.0f}%")
    if task.description:
        st.text(task.description)
    if task.acceptance_criteria:
        st.caption("Acceptance criteria")
        st.text(task.acceptance_criteria)
    if detail.children_tree:
        render_tree(detail.children_tree)
    else:
        st.caption("No child tasks.")


@register_page("Tasks")
def tasks_page():
    st.title("Tasks")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    try:
        nodes = service.task_tree()
    except DashboardError as exc:
        st.error(str(exc))
        return
    if not nodes:
        st.info("No issues found.")
        return

    settings = st.session_state.get("settings")
    limit = getattr(settings, "max_table_rows", 1000)
    st.caption(f"{len(nodes)} issue(s); epics first, then by status.")
    render_tree(nodes, limit=limit)
    csv = service.fetch_dataframe().to_csv(index=False).encode("utf-8")
    st.download_button("Download Issues CSV", data=csv, file_name="beads_issues.csv", mime="text/csv")

    st.markdown("---")
    selected = st.selectbox("Task detail", [""] + [n.id for n in nodes])
    if selected:
        _render_detail(service, selected)
