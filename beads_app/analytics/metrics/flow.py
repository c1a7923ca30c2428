"""Flow metrics: lead time, cycle time, throughput and percentiles.

Durations are whole minutes (truncated toward zero). Hour values are
minutes / 60 and are displayed with one decimal.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from beads_app.core.config import HOURS_UNIT_THRESHOLD_MINUTES, THROUGHPUT_WINDOW_DAYS
from beads_app.core.models import Activity, Issue, Status


@dataclass(slots=True, frozen=True)
class DurationUnit:
    suffix: str
    minutes: float  # Minutes per unit

    def scale(self, value_minutes: float) -> float:
        return value_minutes / self.minutes

    def format(self, value: float) -> str:
        if self.suffix == "h":
            return f"{value:.1f}h"
        return f"{value:.0f}m"


MINUTES = DurationUnit("m", 1.0)
HOURS = DurationUnit("h", 60.0)


def duration_unit(max_minutes: float) -> DurationUnit:
    """Hours when the largest value exceeds an hour, minutes otherwise."""
    return HOURS if max_minutes > HOURS_UNIT_THRESHOLD_MINUTES else MINUTES


def format_hours(hours: float) -> str:
    return HOURS.format(hours)


def whole_minutes(delta: timedelta) -> int:
    return int(delta / timedelta(minutes=1))


def started_times(activities: Iterable[Activity]) -> dict[str, datetime]:
    """First recorded transition into In Progress per issue (first write wins)."""
    started: dict[str, datetime] = {}
    for act in activities:
        if act.new_status is Status.IN_PROGRESS:
            started.setdefault(act.issue_id, act.timestamp)
    return started


def lead_time_minutes(issue: Issue) -> int | None:
    if issue.closed_at is None:
        return None
    return whole_minutes(issue.closed_at - issue.created_at)


def cycle_time_minutes(issue: Issue, started_at: datetime | None) -> int | None:
    if issue.closed_at is None or started_at is None:
        return None
    return whole_minutes(issue.closed_at - started_at)


def _round_half_away(x: float) -> int:
    whole = math.trunc(x)
    if abs(x - whole) >= 0.5:
        whole += 1 if x > 0 else -1
    return int(whole)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile of an ascending sample (no interpolation).

    >>> percentile([10, 20, 30, 40], 50)
    30
    >>> percentile([], 50)
    0.0
    """
    if not sorted_values:
        return 0.0
    n = len(sorted_values)
    idx = _round_half_away((n - 1) * p / 100.0)
    return sorted_values[min(max(idx, 0), n - 1)]


def closed_within(issues: Iterable[Issue], now: datetime, days: int) -> int:
    since = now - timedelta(days=days)
    return sum(1 for i in issues if i.closed_at is not None and i.closed_at >= since)


def throughput_per_day(issues: Iterable[Issue], now: datetime, days: int = THROUGHPUT_WINDOW_DAYS) -> float:
    return closed_within(issues, now, days) / float(days)


def average_lead_time_hours(summary: Mapping[str, Any] | None) -> float:
    """Pre-aggregated average from ``bd status --json`` (0.0 when absent)."""
    if not isinstance(summary, Mapping):
        return 0.0
    block = summary.get("summary")
    if not isinstance(block, Mapping):
        return 0.0
    value = block.get("average_lead_time_hours")
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    return float(value)


@dataclass(slots=True)
class FlowSummary:
    avg_lead_time_hours: float
    avg_cycle_time: float
    cycle_time_unit: DurationUnit
    throughput_per_day: float
    closed_last_7_days: int
    wip_count: int
    blocked_count: int
    p50_lead_time_hours: float
    p90_lead_time_hours: float
    p100_lead_time_hours: float
    p50_cycle_time: float
    p90_cycle_time: float
    p100_cycle_time: float

    def to_dict(self) -> dict[str, Any]:
        out = {name: getattr(self, name) for name in self.__dataclass_fields__}
        out["cycle_time_unit"] = self.cycle_time_unit.suffix
        return out


def compute_flow_summary(
    issues: Sequence[Issue],
    activities: Iterable[Activity],
    summary: Mapping[str, Any] | None,
    now: datetime,
) -> FlowSummary:
    started = started_times(activities)

    cycle_minutes = sorted(
        c for c in (cycle_time_minutes(i, started.get(i.id)) for i in issues) if c is not None
    )
    lead_minutes = sorted(m for m in (lead_time_minutes(i) for i in issues) if m is not None)

    unit = duration_unit(cycle_minutes[-1] if cycle_minutes else 0)
    avg_cycle = sum(cycle_minutes) / len(cycle_minutes) if cycle_minutes else 0.0
    closed_recent = closed_within(issues, now, THROUGHPUT_WINDOW_DAYS)

    return FlowSummary(
        avg_lead_time_hours=average_lead_time_hours(summary),
        avg_cycle_time=unit.scale(avg_cycle),
        cycle_time_unit=unit,
        throughput_per_day=closed_recent / float(THROUGHPUT_WINDOW_DAYS),
        closed_last_7_days=closed_recent,
        wip_count=sum(1 for i in issues if i.status is Status.IN_PROGRESS),
        blocked_count=sum(1 for i in issues if i.status is Status.BLOCKED),
        p50_lead_time_hours=percentile(lead_minutes, 50) / 60.0,
        p90_lead_time_hours=percentile(lead_minutes, 90) / 60.0,
        p100_lead_time_hours=percentile(lead_minutes, 100) / 60.0,
        p50_cycle_time=unit.scale(percentile(cycle_minutes, 50)),
        p90_cycle_time=unit.scale(percentile(cycle_minutes, 90)),
        p100_cycle_time=unit.scale(percentile(cycle_minutes, 100)),
    )
