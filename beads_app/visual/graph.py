"""Altair rendering of a leveled dependency graph layout."""

from __future__ import annotations

import altair as alt
import pandas as pd

from beads_app.analytics.graph.layout import GraphLayout
from beads_app.core.config import CHART_BACKGROUND, GRAPH_NODE_HEIGHT, GRAPH_NODE_WIDTH

STATUS_COLORS = {
    "open": "#4f81bd",
    "pinned": "#8064a2",
    "in_progress": "#f79646",
    "blocked": "#c0504d",
    "deferred": "#7f7f7f",
    "closed": "#9bbb59",
}
# Dashed strokes for relations that do not gate work
_DASHED_TYPES = {"parent-child", "related", "relates-to", "discovered-from", "replies-to"}


def _short(title: str, limit: int = 24) -> str:
    return title if len(title) <= limit else title[: limit - 1] + "…"


def layout_frames(layout: GraphLayout) -> tuple[pd.DataFrame, pd.DataFrame]:
    nodes = pd.DataFrame(
        [
            {
                "id": n.id,
                "title": n.title,
                "label": f"{n.id}\n{_short(n.title)}",
                "status": n.status,
                "issue_type": n.issue_type,
                "level": n.level,
                "x": n.x,
                "y": n.y,
                "x2": n.x + GRAPH_NODE_WIDTH,
                "y2": n.y + GRAPH_NODE_HEIGHT,
                "cx": n.x + GRAPH_NODE_WIDTH / 2,
                "cy": n.y + GRAPH_NODE_HEIGHT / 2,
            }
            for n in layout.nodes
        ],
        columns=["id", "title", "label", "status", "issue_type", "level", "x", "y", "x2", "y2", "cx", "cy"],
    )
    edges = pd.DataFrame(
        [
            {
                "from": e.source,
                "to": e.target,
                "type": e.edge_type,
                "dashed": e.edge_type in _DASHED_TYPES,
                "x1": e.x1,
                "y1": e.y1,
                "x2": e.x2,
                "y2": e.y2,
            }
            for e in layout.edges
        ],
        columns=["from", "to", "type", "dashed", "x1", "y1", "x2", "y2"],
    )
    return nodes, edges


def dependency_graph_chart(layout: GraphLayout):
    if not layout.nodes:
        return None
    nodes, edges = layout_frames(layout)
    x_scale = alt.Scale(domain=[0, layout.width], nice=False)
    # Screen coordinates grow downward
    y_scale = alt.Scale(domain=[layout.height, 0], nice=False)

    edge_layer = (
        alt.Chart(edges)
        .mark_rule(color="#9a8f87", strokeWidth=1.5)
        .encode(
            x=alt.X("x1:Q", scale=x_scale, axis=None),
            y=alt.Y("y1:Q", scale=y_scale, axis=None),
            x2="x2:Q",
            y2="y2:Q",
            strokeDash=alt.condition("datum.dashed", alt.value([4, 3]), alt.value([1, 0])),
            tooltip=["from:N", "type:N", "to:N"],
        )
    )
    box_layer = (
        alt.Chart(nodes)
        .mark_rect(cornerRadius=6, opacity=0.9)
        .encode(
            x=alt.X("x:Q", scale=x_scale, axis=None),
            x2="x2:Q",
            y=alt.Y("y:Q", scale=y_scale, axis=None),
            y2="y2:Q",
            color=alt.Color(
                "status:N",
                scale=alt.Scale(domain=list(STATUS_COLORS), range=list(STATUS_COLORS.values())),
                title="Status",
            ),
            tooltip=["id:N", "title:N", "status:N", "issue_type:N", "level:Q"],
        )
    )
    text_layer = (
        alt.Chart(nodes)
        .mark_text(color="white", fontSize=11, lineBreak="\n")
        .encode(
            x=alt.X("cx:Q", scale=x_scale, axis=None),
            y=alt.Y("cy:Q", scale=y_scale, axis=None),
            text="label:N",
        )
    )
    return (edge_layer + box_layer + text_layer).properties(
        width=layout.width,
        height=layout.height,
        background=CHART_BACKGROUND,
    )
