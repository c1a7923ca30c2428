"""Central configuration, constants, and YAML/environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

import pytz
import yaml

logger = logging.getLogger(__name__)

# =============================================================================
# Issue Store Settings
# =============================================================================
BD_BIN_ENV = "BD_BIN"
DEFAULT_BD_BIN = "bd"
TIMEZONE = "UTC"  # Reference zone for calendar-day buckets and the heat map
DEFAULT_PROJECT_NAME = "Beads"

# =============================================================================
# Issue Defaults
# =============================================================================
DEFAULT_PRIORITY: int = 2

# =============================================================================
# Metrics Windows
# =============================================================================
TREND_WINDOW_DAYS: int = 8  # One week back plus today
THROUGHPUT_WINDOW_DAYS: int = 7
PERCENTILES: tuple[float, ...] = (50.0, 90.0, 100.0)
HOURS_UNIT_THRESHOLD_MINUTES: int = 60
HEATMAP_INTENSITY_LEVELS: int = 4
LANDING_LIST_LIMIT: int = 5

# Series color tags (Nacre dark palette)
SERIES_COLORS: dict[str, str] = {
    "blue": "#4f81bd",
    "green": "#9bbb59",
    "orange": "#f79646",
}
CHART_BACKGROUND = "#231f1d"

# =============================================================================
# Graph Layout Geometry (pixels)
# =============================================================================
GRAPH_NODE_WIDTH: int = 180
GRAPH_NODE_HEIGHT: int = 56
GRAPH_NODE_GAP: int = 40
GRAPH_LEVEL_GAP: int = 80
GRAPH_MARGIN: int = 20

SETTINGS_FILENAME = "dashboard.yaml"


@dataclass(slots=True, frozen=True)
class AppSettings:
    bd_bin: str = DEFAULT_BD_BIN
    timezone: str = TIMEZONE
    project_name: str = DEFAULT_PROJECT_NAME
    trend_window_days: int = TREND_WINDOW_DAYS
    max_table_rows: int = 1000

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)


def load_settings(base_path: str | Path | None = None) -> AppSettings:
    """Build settings from defaults, ``dashboard.yaml`` and the environment.

    The YAML file is optional; a missing or malformed file leaves the defaults
    in place. ``BD_BIN`` in the environment wins over the file.
    """
    settings = AppSettings()
    base = Path(base_path or Path(__file__).resolve().parents[2])
    yaml_path = base / SETTINGS_FILENAME
    if yaml_path.exists():
        try:
            data = yaml.safe_load(yaml_path.read_text()) or {}
        except yaml.YAMLError as exc:
            logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
            data = {}
        section = data.get("dashboard", data) if isinstance(data, dict) else {}
        if not isinstance(section, dict):
            section = {}
        overrides = {
            key: section[key]
            for key in ("bd_bin", "timezone", "project_name", "trend_window_days", "max_table_rows")
            if key in section and section[key] is not None
        }
        tz_name = overrides.get("timezone")
        if tz_name is not None and tz_name not in pytz.all_timezones_set:
            logger.warning("Unknown timezone %r in %s; using %s", tz_name, yaml_path, TIMEZONE)
            overrides.pop("timezone")
        settings = replace(settings, **overrides)
    env_bin = os.environ.get(BD_BIN_ENV)
    if env_bin:
        settings = replace(settings, bd_bin=env_bin)
    return settings
