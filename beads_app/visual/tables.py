"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd
import streamlit as st

from beads_app.analytics.hierarchy.tree import TreeNode
from beads_app.core.models import Issue

TREE_COLUMNS = ["Task", "Type", "Status", "Priority", "Blocked By"]
ISSUE_COLUMNS = ["ID", "Title", "Type", "Status", "Priority", "Assignee"]
_INDENT = "\u2003"  # em space survives dataframe cell whitespace trimming


def tree_to_dataframe(nodes: Sequence[TreeNode]) -> pd.DataFrame:
    rows = []
    for node in nodes:
        marker = "▾ " if node.has_children else "• "
        rows.append(
            {
                "Task": f"{_INDENT * node.depth}{marker}{node.id}  {node.title}",
                "Type": node.issue_type.label,
                "Status": node.status.label,
                "Priority": f"P{node.priority}",
                "Blocked By": node.blocked_by_count,
            }
        )
    return pd.DataFrame(rows, columns=TREE_COLUMNS)


def issues_table(issues: Sequence[Issue]) -> pd.DataFrame:
    rows = [
        {
            "ID": i.id,
            "Title": i.title,
            "Type": i.issue_type.label,
            "Status": i.status.label,
            "Priority": "" if i.priority is None else f"P{i.priority}",
            "Assignee": i.assignee or "Unassigned",
        }
        for i in issues
    ]
    return pd.DataFrame(rows, columns=ISSUE_COLUMNS)


def render_tree(nodes: Sequence[TreeNode], limit: int = 1000):
    st.dataframe(tree_to_dataframe(nodes).head(limit), hide_index=True, use_container_width=True)


def render_issue_table(issues: Sequence[Issue], limit: int = 1000):
    if not issues:
        st.caption("Nothing here.")
        return
    st.dataframe(issues_table(issues).head(limit), hide_index=True, use_container_width=True)
