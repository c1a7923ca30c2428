"""Mapping raw ``bd`` JSON records into Issue, Dependency and Activity instances."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

import pandas as pd

from .config import DEFAULT_PRIORITY
from .models import Activity, Dependency, DependencyType, EventType, Issue, IssueType, Status

logger = logging.getLogger(__name__)


def parse_dt(val) -> datetime | None:
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _optional_status(value) -> Status | None:
    if not value:
        return None
    return Status.from_value(value)


def _optional_int(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def map_dependency(raw: dict[str, Any], owner_id: str | None = None) -> Dependency | None:
    issue_id = raw.get("issue_id") or owner_id
    depends_on_id = raw.get("depends_on_id")
    if not issue_id or not depends_on_id:
        return None
    return Dependency(
        issue_id=str(issue_id),
        depends_on_id=str(depends_on_id),
        dep_type=DependencyType.from_value(raw.get("type") or raw.get("dep_type")),
        created_at=parse_dt(raw.get("created_at")),
        created_by=raw.get("created_by"),
    )


def map_issue(raw: dict[str, Any]) -> Issue | None:
    """Map one exported issue record; returns None for unusable records."""
    issue_id = raw.get("id")
    created_at = parse_dt(raw.get("created_at"))
    if not issue_id or created_at is None:
        logger.warning("Skipping issue record without id/created_at: %r", issue_id)
        return None
    issue_id = str(issue_id)
    dependencies = []
    for dep_raw in raw.get("dependencies") or []:
        if not isinstance(dep_raw, dict):
            continue
        dep = map_dependency(dep_raw, owner_id=issue_id)
        if dep is not None:
            dependencies.append(dep)
    return Issue(
        id=issue_id,
        title=str(raw.get("title") or ""),
        status=Status.from_value(raw.get("status")),
        issue_type=IssueType.from_value(raw.get("issue_type") or raw.get("type")),
        created_at=created_at,
        updated_at=parse_dt(raw.get("updated_at")) or created_at,
        priority=_optional_int(raw.get("priority")),
        closed_at=parse_dt(raw.get("closed_at")),
        assignee=raw.get("assignee") or None,
        labels=tuple(raw.get("labels") or ()),
        description=raw.get("description"),
        acceptance_criteria=raw.get("acceptance_criteria"),
        close_reason=raw.get("close_reason"),
        estimate=_optional_int(raw.get("estimate")),
        dependencies=tuple(dependencies),
    )


def map_activity(raw: dict[str, Any]) -> Activity | None:
    timestamp = parse_dt(raw.get("timestamp"))
    issue_id = raw.get("issue_id")
    if timestamp is None or not issue_id:
        return None
    return Activity(
        timestamp=timestamp,
        issue_id=str(issue_id),
        event_type=EventType.from_value(raw.get("type")),
        message=str(raw.get("message") or ""),
        old_status=_optional_status(raw.get("old_status")),
        new_status=_optional_status(raw.get("new_status")),
    )


def map_issues(raw_issues: Iterable[dict[str, Any]]) -> list[Issue]:
    issues = (map_issue(r) for r in raw_issues if isinstance(r, dict))
    return [i for i in issues if i is not None]


def map_activities(raw_events: Iterable[dict[str, Any]]) -> list[Activity]:
    events = (map_activity(r) for r in raw_events if isinstance(r, dict))
    return [e for e in events if e is not None]


def issues_to_dataframe(issues: Iterable[Issue]) -> pd.DataFrame:
    rows = []
    for i in issues:
        rows.append(
            {
                "id": i.id,
                "title": i.title,
                "status": i.status.label,
                "issue_type": i.issue_type.label,
                "priority": i.priority if i.priority is not None else DEFAULT_PRIORITY,
                "assignee": i.assignee or "Unassigned",
                "labels": ", ".join(sorted({lbl for lbl in i.labels if lbl}, key=str.lower)),
                "blocked_by": i.blocked_by_count,
                "created": i.created_at,
                "updated": i.updated_at,
                "closed": i.closed_at,
            }
        )
    return pd.DataFrame(rows)
