"""Board page: one column per workflow status."""

from __future__ import annotations

import streamlit as st

from beads_app.app import register_page
from beads_app.core.errors import DashboardError
from beads_app.core.service import IssueService


@register_page("Board")
def board_page():
    st.title("Board")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    try:
        columns = service.board()
    except DashboardError as exc:
        st.error(str(exc))
        return

    for col, column in zip(st.columns(len(columns)), columns):
        with col:
            st.subheader(f"{column.name} ({len(column.issues)})")
            for issue in column.issues:
                with st.container(border=True):
                    st.markdown(f"**{issue.id}** · {issue.issue_type.label}")
                    st.write(issue.title)
                    if issue.assignee:
                        st.caption(issue.assignee)
