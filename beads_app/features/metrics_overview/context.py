"""Pure helpers to build the metrics view context (no Streamlit)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import pytz

from beads_app.analytics.metrics.activity import window_dates
from beads_app.analytics.metrics.chart_data import BarChart, HeatMap
from beads_app.analytics.metrics.flow import FlowSummary, compute_flow_summary, started_times
from beads_app.analytics.metrics.heatmap import build_heatmap
from beads_app.analytics.metrics.trends import (
    build_created_resolved_chart,
    build_cycle_time_chart,
    build_lead_time_chart,
    build_throughput_chart,
)
from beads_app.core.config import TREND_WINDOW_DAYS
from beads_app.core.models import Activity, Issue


@dataclass(slots=True)
class MetricsContext:
    summary: FlowSummary
    tickets_chart: BarChart
    lead_time_chart: BarChart
    cycle_time_chart: BarChart
    throughput_chart: BarChart
    heatmap: HeatMap

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.summary.to_dict(),
            "tickets_chart": self.tickets_chart.to_dict(),
            "lead_time_chart": self.lead_time_chart.to_dict(),
            "cycle_time_chart": self.cycle_time_chart.to_dict(),
            "throughput_chart": self.throughput_chart.to_dict(),
            "heatmap": self.heatmap.to_dict(),
        }


def build_metrics_context(
    issues: Sequence[Issue],
    activities: Sequence[Activity],
    summary: Mapping[str, Any] | None,
    *,
    now: datetime | None = None,
    tz=None,
    window_days: int = TREND_WINDOW_DAYS,
) -> MetricsContext:
    tz = tz or pytz.UTC
    now = now or datetime.now(pytz.UTC)
    dates = window_dates(now, window_days, tz)
    started = started_times(activities)

    heat_timestamps = [a.timestamp for a in activities] + [i.created_at for i in issues]
    return MetricsContext(
        summary=compute_flow_summary(issues, activities, summary, now),
        tickets_chart=build_created_resolved_chart(issues, dates, tz),
        lead_time_chart=build_lead_time_chart(issues, dates, tz),
        cycle_time_chart=build_cycle_time_chart(issues, started, dates, tz),
        throughput_chart=build_throughput_chart(issues, dates, tz),
        heatmap=build_heatmap(heat_timestamps, tz),
    )
