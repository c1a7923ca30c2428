"""Weekday x hour-of-day activity heat map."""

from __future__ import annotations

import calendar
from collections.abc import Iterable

from beads_app.core.config import HEATMAP_INTENSITY_LEVELS

from .activity import localize_series
from .chart_data import HeatCell, HeatMap

WEEKDAY_LABELS = [calendar.day_abbr[d] for d in range(7)]  # Mon..Sun
HOUR_LABELS = [str(h) for h in range(24)]


def heat_intensity(value: int, max_value: int, levels: int = HEATMAP_INTENSITY_LEVELS) -> int:
    """``ceil(value / max_value * levels)`` in integer arithmetic, 0 for empty cells."""
    if value <= 0 or max_value <= 0:
        return 0
    return min(-(-value * levels // max_value), levels)


def weekday_hour_counts(timestamps: Iterable, target_tz) -> list[list[int]]:
    local = localize_series(timestamps, target_tz)
    if local.empty:
        return [[0] * 24 for _ in range(7)]
    grid = (
        local.groupby([local.dt.weekday, local.dt.hour])
        .size()
        .unstack(fill_value=0)
        .reindex(index=range(7), columns=range(24), fill_value=0)
    )
    return [[int(v) for v in row] for row in grid.to_numpy().tolist()]


def build_heatmap(timestamps: Iterable, target_tz) -> HeatMap:
    counts = weekday_hour_counts(timestamps, target_tz)
    max_value = max((v for row in counts for v in row), default=0)
    cells = [[HeatCell(value=v, intensity=heat_intensity(v, max_value)) for v in row] for row in counts]
    return HeatMap(
        row_labels=list(WEEKDAY_LABELS),
        col_labels=list(HOUR_LABELS),
        cells=cells,
        max_value=max_value,
    )
