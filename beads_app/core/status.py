"""Status ordering and grouping helpers reused by tree, board and epic views."""

from __future__ import annotations

from .models import Issue, Status

# Lower sorts first in tree and epic listings
STATUS_SORT_ORDER: dict[Status, int] = {
    Status.OPEN: 0,
    Status.PINNED: 1,
    Status.IN_PROGRESS: 2,
    Status.BLOCKED: 3,
    Status.DEFERRED: 4,
    Status.CLOSED: 5,
    Status.TOMBSTONE: 6,
}

# Columns rendered on the board, left to right
BOARD_STATUSES: tuple[Status, ...] = (
    Status.OPEN,
    Status.IN_PROGRESS,
    Status.BLOCKED,
    Status.DEFERRED,
    Status.CLOSED,
)


def status_sort_order(status: Status) -> int:
    return STATUS_SORT_ORDER.get(status, len(STATUS_SORT_ORDER))


def is_active(issue: Issue) -> bool:
    """Tombstoned (soft-deleted) issues are hidden from every view."""
    return issue.status is not Status.TOMBSTONE


def active_issues(issues) -> list[Issue]:
    return [i for i in issues if is_active(i)]


def tree_sort_key(issue: Issue) -> tuple[bool, int, str]:
    """Epics first, then status order, then id ascending."""
    return (not issue.is_epic, status_sort_order(issue.status), issue.id)
