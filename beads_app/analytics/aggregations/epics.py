"""Epic progress aggregation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from beads_app.core.errors import NotFoundError
from beads_app.core.models import Issue, IssueType, Status
from beads_app.core.status import status_sort_order


@dataclass(slots=True)
class EpicProgress:
    issue: Issue
    total: int
    closed: int
    percent: float
    children: list[Issue] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.issue.id,
            "title": self.issue.title,
            "status": self.issue.status.value,
            "total": self.total,
            "closed": self.closed,
            "percent": self.percent,
            "children": [c.id for c in self.children],
        }


def epic_children(epic: Issue, issues: Sequence[Issue]) -> list[Issue]:
    """Issues depending on the epic in any way, or named under it (``<epic>.``)."""
    prefix = f"{epic.id}."
    children = [
        i
        for i in issues
        if i.id.startswith(prefix) or any(d.depends_on_id == epic.id for d in i.dependencies)
    ]
    # Stable: snapshot order within one status
    children.sort(key=lambda i: status_sort_order(i.status))
    return children


def epic_progress(epic: Issue, issues: Sequence[Issue], *, include_children: bool = True) -> EpicProgress:
    children = epic_children(epic, issues)
    total = len(children)
    closed = sum(1 for c in children if c.status is Status.CLOSED)
    return EpicProgress(
        issue=epic,
        total=total,
        closed=closed,
        percent=(closed / total * 100.0) if total else 0.0,
        children=children if include_children else [],
    )


def list_epics(issues: Sequence[Issue]) -> list[EpicProgress]:
    """All epics with progress, most recently updated first."""
    epics = [epic_progress(i, issues) for i in issues if i.issue_type is IssueType.EPIC]
    epics.sort(key=lambda e: e.issue.updated_at, reverse=True)
    return epics


def epic_detail(epic_id: str, issues: Sequence[Issue]) -> EpicProgress:
    for issue in issues:
        if issue.id == epic_id and issue.issue_type is IssueType.EPIC:
            return epic_progress(issue, issues)
    raise NotFoundError(f"Epic {epic_id}")
