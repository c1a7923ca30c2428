"""Renderer-agnostic chart value objects (bar charts and the heat map)."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field


@dataclass(slots=True, frozen=True)
class Bar:
    value: float
    percent: float  # Share of the chart-wide maximum, 0-100
    display: str


@dataclass(slots=True, frozen=True)
class Series:
    name: str
    color: str  # Color tag, see config.SERIES_COLORS
    bars: tuple[Bar, ...]

    @property
    def values(self) -> list[float]:
        return [b.value for b in self.bars]


@dataclass(slots=True)
class BarChart:
    labels: list[str]
    series: list[Series] = field(default_factory=list)
    unit: str = ""

    @property
    def max_value(self) -> float:
        return max((b.value for s in self.series for b in s.bars), default=0)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class HeatCell:
    value: int
    intensity: int  # 0-4


@dataclass(slots=True)
class HeatMap:
    row_labels: list[str]
    col_labels: list[str]
    cells: list[list[HeatCell]]
    max_value: int

    def to_dict(self) -> dict:
        return asdict(self)


def _default_display(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def build_bar_chart(
    labels: Sequence[str],
    series_specs: Sequence[tuple[str, str, Sequence[float]]],
    *,
    formatter: Callable[[float], str] | None = None,
    unit: str = "",
) -> BarChart:
    """Assemble a bar chart from ``(name, color, values)`` triples."""
    fmt = formatter or _default_display
    peak = max((v for _name, _color, values in series_specs for v in values), default=0)
    series = []
    for name, color, values in series_specs:
        bars = tuple(
            Bar(
                value=v,
                percent=(v / peak * 100.0) if peak > 0 else 0.0,
                display=fmt(v),
            )
            for v in values
        )
        series.append(Series(name=name, color=color, bars=bars))
    return BarChart(labels=list(labels), series=series, unit=unit)
