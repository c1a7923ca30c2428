"""Project-level counts, landing highlights and board columns."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from beads_app.core.config import LANDING_LIST_LIMIT
from beads_app.core.models import Issue, IssueType, Status
from beads_app.core.status import BOARD_STATUSES

from .epics import EpicProgress, epic_progress


@dataclass(slots=True)
class ProjectStats:
    total: int = 0
    open: int = 0
    in_progress: int = 0
    blocked: int = 0
    closed: int = 0

    @classmethod
    def from_issues(cls, issues: Sequence[Issue]) -> ProjectStats:
        counts = Counter(i.status for i in issues)
        return cls(
            total=len(issues),
            open=counts[Status.OPEN],
            in_progress=counts[Status.IN_PROGRESS],
            blocked=counts[Status.BLOCKED],
            closed=counts[Status.CLOSED],
        )


@dataclass(slots=True)
class LandingData:
    stats: ProjectStats
    epics: list[EpicProgress] = field(default_factory=list)
    blocked: list[Issue] = field(default_factory=list)
    in_progress: list[Issue] = field(default_factory=list)


@dataclass(slots=True)
class BoardColumn:
    name: str
    status: str
    issues: list[Issue] = field(default_factory=list)


def landing_data(issues: Sequence[Issue], limit: int = LANDING_LIST_LIMIT) -> LandingData:
    # Least complete first to surface where work is needed
    epics = [
        epic_progress(i, issues, include_children=False)
        for i in issues
        if i.issue_type is IssueType.EPIC and i.status is not Status.CLOSED
    ]
    epics.sort(key=lambda e: e.percent)
    return LandingData(
        stats=ProjectStats.from_issues(issues),
        epics=epics,
        blocked=[i for i in issues if i.status is Status.BLOCKED][:limit],
        in_progress=[i for i in issues if i.status is Status.IN_PROGRESS][:limit],
    )


def board_columns(issues: Sequence[Issue]) -> list[BoardColumn]:
    return [
        BoardColumn(
            name=status.label,
            status=status.value,
            issues=[i for i in issues if i.status is status],
        )
        for status in BOARD_STATUSES
    ]
