"""Timestamp normalization into the reference time zone."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

import pandas as pd
import pytz


def normalize_timestamp(value, target_tz) -> pd.Timestamp | None:
    """Normalize a timestamp-like value into ``target_tz``.

    Naive values are taken as UTC. Returns None when the input cannot be parsed.
    """
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.tz_convert(target_tz)


def localize_series(values: Iterable, target_tz) -> pd.Series:
    """Vectorized variant: unparseable entries are dropped."""
    ts = pd.Series(pd.to_datetime(list(values), utc=True, errors="coerce"))
    return ts.dropna().dt.tz_convert(target_tz)


def window_dates(now: datetime, days: int, target_tz=pytz.UTC) -> list[date]:
    """``days`` consecutive calendar dates ending at today's local date."""
    today = normalize_timestamp(now, target_tz).date()
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
