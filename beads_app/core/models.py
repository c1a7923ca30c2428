"""Domain data models for beads issues, dependencies, and activity events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

logger = logging.getLogger(__name__)


class _WireEnum(StrEnum):
    """StrEnum whose members parse leniently from wire values."""

    @classmethod
    def default(cls):
        return next(iter(cls))

    @classmethod
    def from_value(cls, value):
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        fallback = cls.default()
        logger.debug("Unknown %s %r; using %s", cls.__name__, value, fallback.value)
        return fallback


class Status(_WireEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DEFERRED = "deferred"
    CLOSED = "closed"
    TOMBSTONE = "tombstone"
    PINNED = "pinned"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    Status.OPEN: "Open",
    Status.IN_PROGRESS: "In Progress",
    Status.BLOCKED: "Blocked",
    Status.DEFERRED: "Deferred",
    Status.CLOSED: "Closed",
    Status.TOMBSTONE: "Tombstone",
    Status.PINNED: "Pinned",
}


class IssueType(_WireEnum):
    TASK = "task"
    BUG = "bug"
    FEATURE = "feature"
    EPIC = "epic"
    CHORE = "chore"
    MESSAGE = "message"
    MERGE_REQUEST = "merge-request"
    MOLECULE = "molecule"
    GATE = "gate"

    @property
    def label(self) -> str:
        if self is IssueType.MERGE_REQUEST:
            return "Merge Request"
        return self.value.title()

    @property
    def css_class(self) -> str:
        return self.value


class DependencyType(_WireEnum):
    BLOCKS = "blocks"
    PARENT_CHILD = "parent-child"
    CONDITIONAL_BLOCKS = "conditional-blocks"
    WAITS_FOR = "waits-for"
    RELATED = "related"
    DISCOVERED_FROM = "discovered-from"
    REPLIES_TO = "replies-to"
    RELATES_TO = "relates-to"
    DUPLICATES = "duplicates"
    SUPERSEDES = "supersedes"
    AUTHORED_BY = "authored-by"
    ASSIGNED_TO = "assigned-to"
    APPROVED_BY = "approved-by"

    def affects_workflow(self) -> bool:
        """True for every relation except the hierarchical parent-child link."""
        return self is not DependencyType.PARENT_CHILD


class EventType(_WireEnum):
    CREATED = "create"
    UPDATED = "update"
    STATUS_CHANGED = "status"
    COMMENTED = "commented"
    CLOSED = "closed"
    REOPENED = "reopened"
    DEPENDENCY_ADDED = "dependency_added"
    DEPENDENCY_REMOVED = "dependency_removed"
    LABEL_ADDED = "label_added"
    LABEL_REMOVED = "label_removed"
    COMPACTED = "compacted"


def dot_parent_of(issue_id: str) -> str | None:
    """Id prefix up to the last ``.``, or None for an undotted id."""
    head, sep, _tail = issue_id.rpartition(".")
    return head if sep else None


@dataclass(slots=True, frozen=True)
class Dependency:
    issue_id: str
    depends_on_id: str
    dep_type: DependencyType = DependencyType.BLOCKS
    created_at: datetime | None = None
    created_by: str | None = None


@dataclass(slots=True, frozen=True)
class Issue:
    id: str
    title: str
    status: Status
    issue_type: IssueType
    created_at: datetime
    updated_at: datetime
    priority: int | None = None
    closed_at: datetime | None = None
    assignee: str | None = None
    labels: tuple[str, ...] = ()
    description: str | None = None
    acceptance_criteria: str | None = None
    close_reason: str | None = None
    estimate: int | None = None
    dependencies: tuple[Dependency, ...] = field(default_factory=tuple)

    @property
    def is_epic(self) -> bool:
        return self.issue_type is IssueType.EPIC

    @property
    def dot_parent_id(self) -> str | None:
        return dot_parent_of(self.id)

    @property
    def blocked_by_count(self) -> int:
        return sum(1 for dep in self.dependencies if dep.dep_type.affects_workflow())


@dataclass(slots=True, frozen=True)
class Activity:
    timestamp: datetime
    issue_id: str
    event_type: EventType = EventType.CREATED
    message: str = ""
    old_status: Status | None = None
    new_status: Status | None = None
