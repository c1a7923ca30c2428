"""Daily trend buckets over a trailing window of calendar days."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime

import pandas as pd

from beads_app.core.config import PERCENTILES, SERIES_COLORS
from beads_app.core.models import Issue

from .activity import localize_series
from .chart_data import BarChart, build_bar_chart
from .flow import (
    HOURS,
    cycle_time_minutes,
    duration_unit,
    lead_time_minutes,
    percentile,
)

_PERCENTILE_COLORS = (SERIES_COLORS["blue"], SERIES_COLORS["green"], SERIES_COLORS["orange"])


def day_labels(dates: Sequence[date]) -> list[str]:
    return [d.strftime("%a %d") for d in dates]


def daily_counts(timestamps: Iterable, dates: Sequence[date], target_tz) -> list[int]:
    """Count timestamps per local calendar date; days without events are 0."""
    local = localize_series(timestamps, target_tz)
    if local.empty:
        return [0] * len(dates)
    counts = local.dt.date.value_counts()
    return [int(v) for v in counts.reindex(list(dates), fill_value=0).tolist()]


def daily_percentiles(
    samples: Iterable[tuple[datetime, float]],
    dates: Sequence[date],
    target_tz,
    percentiles: Sequence[float] = PERCENTILES,
) -> dict[float, list[float]]:
    """Per-day nearest-rank percentiles of ``(timestamp, value)`` samples.

    Samples are bucketed by the local date of their timestamp. Days with no
    samples contribute 0 to every series.
    """
    samples = list(samples)
    out: dict[float, list[float]] = {p: [0.0] * len(dates) for p in percentiles}
    if not samples:
        return out
    frame = pd.DataFrame(samples, columns=["ts", "value"])
    frame["ts"] = pd.to_datetime(frame["ts"], utc=True, errors="coerce")
    frame = frame.dropna(subset=["ts"])
    frame["day"] = frame["ts"].dt.tz_convert(target_tz).dt.date
    grouped = {day: sorted(group["value"].tolist()) for day, group in frame.groupby("day")}
    for idx, day in enumerate(dates):
        values = grouped.get(day)
        if not values:
            continue
        for p in percentiles:
            out[p][idx] = float(percentile(values, p))
    return out


def _percentile_series(per_day: Mapping[float, list[float]]) -> list[tuple[str, str, list[float]]]:
    return [
        (f"p{p:g}", color, values)
        for (p, values), color in zip(per_day.items(), _PERCENTILE_COLORS)
    ]


def build_created_resolved_chart(issues: Sequence[Issue], dates: Sequence[date], target_tz) -> BarChart:
    created = daily_counts((i.created_at for i in issues), dates, target_tz)
    resolved = daily_counts((i.closed_at for i in issues if i.closed_at), dates, target_tz)
    return build_bar_chart(
        day_labels(dates),
        [
            ("Created", SERIES_COLORS["blue"], created),
            ("Resolved", SERIES_COLORS["green"], resolved),
        ],
    )


def build_throughput_chart(issues: Sequence[Issue], dates: Sequence[date], target_tz) -> BarChart:
    closed = daily_counts((i.closed_at for i in issues if i.closed_at), dates, target_tz)
    return build_bar_chart(day_labels(dates), [("Closed", SERIES_COLORS["blue"], closed)])


def build_lead_time_chart(issues: Sequence[Issue], dates: Sequence[date], target_tz) -> BarChart:
    samples = [
        (issue.closed_at, lead_time_minutes(issue) / 60.0)
        for issue in issues
        if issue.closed_at is not None
    ]
    per_day = daily_percentiles(samples, dates, target_tz)
    return build_bar_chart(
        day_labels(dates),
        _percentile_series(per_day),
        formatter=HOURS.format,
        unit=HOURS.suffix,
    )


def build_cycle_time_chart(
    issues: Sequence[Issue],
    started: Mapping[str, datetime],
    dates: Sequence[date],
    target_tz,
) -> BarChart:
    """Per-close-day cycle time percentiles.

    The unit follows the largest cycle time closed inside the window.
    """
    samples = []
    for issue in issues:
        minutes = cycle_time_minutes(issue, started.get(issue.id))
        if minutes is not None:
            samples.append((issue.closed_at, float(minutes)))
    per_day = daily_percentiles(samples, dates, target_tz)
    unit = duration_unit(max((v for values in per_day.values() for v in values), default=0))
    scaled = {p: [unit.scale(v) for v in values] for p, values in per_day.items()}
    return build_bar_chart(
        day_labels(dates),
        _percentile_series(scaled),
        formatter=unit.format,
        unit=unit.suffix,
    )
