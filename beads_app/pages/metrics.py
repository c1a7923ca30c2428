"""Metrics page: flow summary, daily trends and the activity heat map."""

from __future__ import annotations

import streamlit as st

from beads_app.analytics.metrics.flow import format_hours
from beads_app.app import register_page
from beads_app.core.errors import DashboardError
from beads_app.core.service import IssueService
from beads_app.visual.charts import activity_heatmap, grouped_bar_chart


def _render_bar(chart, title: str):
    st.subheader(title)
    rendered = grouped_bar_chart(chart, title=title)
    if rendered is None or chart.max_value == 0:
        st.caption("No data in this window.")
        return
    st.altair_chart(rendered, use_container_width=True)


@register_page("Metrics")
def metrics_page():
    st.title("Metrics")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    try:
        ctx = service.metrics()
    except DashboardError as exc:
        st.error(str(exc))
        return

    s = ctx.summary
    unit = s.cycle_time_unit
    row = st.columns(5)
    row[0].metric("Avg lead time", format_hours(s.avg_lead_time_hours))
    row[1].metric("Avg cycle time", unit.format(s.avg_cycle_time))
    row[2].metric("Throughput / day", f"{s.throughput_per_day:.1f}", help=f"{s.closed_last_7_days} closed in 7 days")
    row[3].metric("WIP", s.wip_count)
    row[4].metric("Blocked", s.blocked_count)

    lead, cycle = st.columns(2)
    with lead:
        st.caption("Lead time p50 / p90 / p100")
        st.write(
            " / ".join(format_hours(v) for v in (s.p50_lead_time_hours, s.p90_lead_time_hours, s.p100_lead_time_hours))
        )
    with cycle:
        st.caption("Cycle time p50 / p90 / p100")
        st.write(" / ".join(unit.format(v) for v in (s.p50_cycle_time, s.p90_cycle_time, s.p100_cycle_time)))

    _render_bar(ctx.tickets_chart, "Created vs Resolved")
    _render_bar(ctx.throughput_chart, "Throughput")
    _render_bar(ctx.lead_time_chart, "Lead time")
    _render_bar(ctx.cycle_time_chart, "Cycle time")

    st.subheader("Activity heat map")
    if ctx.heatmap.max_value == 0:
        st.caption("No activity recorded.")
    else:
        st.altair_chart(activity_heatmap(ctx.heatmap), use_container_width=True)
