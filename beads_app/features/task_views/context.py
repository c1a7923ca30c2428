"""Pure helpers for the task list, task detail and landing views."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from beads_app.analytics.aggregations.epics import EpicProgress, epic_progress
from beads_app.analytics.aggregations.stats import LandingData, landing_data
from beads_app.analytics.hierarchy.tree import TreeNode, build_issue_tree
from beads_app.core.errors import BadRequestError, NotFoundError
from beads_app.core.models import Issue
from beads_app.core.status import active_issues


@dataclass(slots=True)
class TaskDetailContext:
    task: EpicProgress
    children_tree: list[TreeNode] = field(default_factory=list)
    can_expand: bool = False

    def to_dict(self) -> dict:
        return {
            "task": self.task.to_dict(),
            "children_tree": [n.to_dict() for n in self.children_tree],
            "can_expand": self.can_expand,
        }


def _find_issue(issue_id: str, issues: Sequence[Issue]) -> Issue:
    if not issue_id or not issue_id.strip():
        raise BadRequestError("issue id must not be empty")
    for issue in issues:
        if issue.id == issue_id:
            return issue
    raise NotFoundError(f"Task {issue_id}")


def build_task_subtree(issue_id: str, issues: Sequence[Issue]) -> list[TreeNode]:
    """Descendants of ``issue_id`` re-rooted so its direct children sit at depth 0.

    The selection is the issue itself, every issue with a dependency on it and
    every dot-notation descendant (``<id>.``). The issue's own node is dropped.
    """
    prefix = f"{issue_id}."
    selected = [
        i
        for i in issues
        if i.id == issue_id
        or i.id.startswith(prefix)
        or any(d.depends_on_id == issue_id for d in i.dependencies)
    ]
    nodes = build_issue_tree(selected)

    task_idx = next((idx for idx, n in enumerate(nodes) if n.id == issue_id), None)
    if task_idx is None:
        return nodes
    task_depth = nodes[task_idx].depth

    out: list[TreeNode] = nodes[:task_idx]
    in_subtree = True
    for node in nodes[task_idx + 1 :]:
        if in_subtree and node.depth <= task_depth:
            in_subtree = False
        if not in_subtree:
            out.append(node)
            continue
        out.append(
            replace(
                node,
                depth=node.depth - task_depth - 1,
                parent_id=None if node.parent_id == issue_id else node.parent_id,
            )
        )
    return out


def build_task_detail(issue_id: str, issues: Sequence[Issue]) -> TaskDetailContext:
    task = _find_issue(issue_id, issues)
    children = build_task_subtree(issue_id, issues)
    return TaskDetailContext(
        task=epic_progress(task, issues, include_children=False),
        children_tree=children,
        can_expand=any(n.has_children for n in children),
    )


def build_landing_context(issues: Sequence[Issue]) -> LandingData:
    return landing_data(active_issues(issues))
