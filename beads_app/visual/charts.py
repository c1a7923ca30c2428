"""Chart builders (Altair) for the metrics view models."""

from __future__ import annotations

import altair as alt
import pandas as pd

from beads_app.analytics.metrics.chart_data import BarChart, HeatMap
from beads_app.core.config import CHART_BACKGROUND

# Heat map palette, one entry per intensity level 0-4
HEAT_COLORS = ["#2b2522", "#0e4429", "#006d32", "#26a641", "#39d353"]


def bar_chart_frame(chart: BarChart) -> pd.DataFrame:
    rows = []
    for series in chart.series:
        for label, bar in zip(chart.labels, series.bars):
            rows.append(
                {
                    "label": label,
                    "series": series.name,
                    "value": bar.value,
                    "display": bar.display,
                    "color": series.color,
                }
            )
    return pd.DataFrame(rows, columns=["label", "series", "value", "display", "color"])


def grouped_bar_chart(chart: BarChart, *, title: str = "", height: int = 280):
    frame = bar_chart_frame(chart)
    if frame.empty:
        return None
    names = [s.name for s in chart.series]
    colors = [s.color for s in chart.series]
    y_title = f"{title} ({chart.unit})" if chart.unit else title
    return (
        alt.Chart(frame)
        .mark_bar()
        .encode(
            x=alt.X("label:N", title=None, sort=list(chart.labels)),
            xOffset=alt.XOffset("series:N", sort=names),
            y=alt.Y("value:Q", title=y_title),
            color=alt.Color("series:N", scale=alt.Scale(domain=names, range=colors), title=None),
            tooltip=[
                alt.Tooltip("label:N", title="Day"),
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("display:N", title="Value"),
            ],
        )
        .properties(height=height, background=CHART_BACKGROUND)
    )


def heatmap_frame(heatmap: HeatMap) -> pd.DataFrame:
    rows = []
    for row_label, row in zip(heatmap.row_labels, heatmap.cells):
        for col_label, cell in zip(heatmap.col_labels, row):
            rows.append(
                {
                    "weekday": row_label,
                    "hour": col_label,
                    "count": cell.value,
                    "intensity": cell.intensity,
                }
            )
    return pd.DataFrame(rows, columns=["weekday", "hour", "count", "intensity"])


def activity_heatmap(heatmap: HeatMap, *, height: int = 220):
    frame = heatmap_frame(heatmap)
    return (
        alt.Chart(frame)
        .mark_rect(stroke=CHART_BACKGROUND, strokeWidth=2)
        .encode(
            x=alt.X("hour:O", title="Hour", sort=list(heatmap.col_labels)),
            y=alt.Y("weekday:O", title=None, sort=list(heatmap.row_labels)),
            color=alt.Color(
                "intensity:O",
                scale=alt.Scale(domain=list(range(len(HEAT_COLORS))), range=HEAT_COLORS),
                legend=None,
            ),
            tooltip=[
                alt.Tooltip("weekday:O", title="Day"),
                alt.Tooltip("hour:O", title="Hour"),
                alt.Tooltip("count:Q", title="Events"),
            ],
        )
        .properties(height=height, background=CHART_BACKGROUND)
    )
