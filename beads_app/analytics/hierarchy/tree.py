"""Hierarchy resolution: issues -> ordered, depth-annotated display tree.

Parents come from two signals. An explicit ``parent-child`` dependency whose
target exists in the snapshot wins; otherwise the dot-notation prefix of the
id (``proj-1.2`` -> ``proj-1``) is used when that prefix is itself an issue.
The graph builder resolves primary parents with the same rule.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Collection, Iterable, Mapping
from dataclasses import asdict, dataclass, field

from beads_app.core.config import DEFAULT_PRIORITY
from beads_app.core.models import (
    Dependency,
    DependencyType,
    Issue,
    IssueType,
    Status,
    dot_parent_of,
)
from beads_app.core.status import active_issues, tree_sort_key

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TreeNode:
    id: str
    title: str
    status: Status
    issue_type: IssueType
    priority: int
    blocked_by_count: int
    has_children: bool
    depth: int
    parent_id: str | None

    def to_dict(self) -> dict:
        out = asdict(self)
        out["status"] = self.status.value
        out["issue_type"] = self.issue_type.css_class
        return out


@dataclass(slots=True)
class HierarchyResolution:
    nodes: list[TreeNode]
    # Issues whose parent chain loops back on itself (never reachable from a root)
    cyclic_ids: set[str] = field(default_factory=set)


def resolve_parent(
    issue_id: str,
    dependencies: Iterable[Dependency],
    known_ids: Collection[str],
) -> str | None:
    """Return the parent of ``issue_id`` within ``known_ids`` (or None)."""
    for dep in dependencies:
        if dep.dep_type is not DependencyType.PARENT_CHILD:
            continue
        target = dep.depends_on_id
        if target != issue_id and target in known_ids:
            return target
    dot_parent = dot_parent_of(issue_id)
    if dot_parent is not None and dot_parent in known_ids:
        return dot_parent
    return None


def _index_issues(issues: Iterable[Issue]) -> dict[str, Issue]:
    issue_map: dict[str, Issue] = {}
    for issue in issues:
        issue_map.setdefault(issue.id, issue)
    return issue_map


def _emit_preorder(
    root_id: str,
    issue_map: Mapping[str, Issue],
    children_map: Mapping[str, list[str]],
    visited: set[str],
    nodes: list[TreeNode],
) -> None:
    stack: list[tuple[str, int, str | None]] = [(root_id, 0, None)]
    while stack:
        node_id, depth, parent_id = stack.pop()
        if node_id in visited:
            continue
        issue = issue_map.get(node_id)
        if issue is None:
            continue
        visited.add(node_id)
        children = children_map.get(node_id, [])
        nodes.append(
            TreeNode(
                id=issue.id,
                title=issue.title,
                status=issue.status,
                issue_type=issue.issue_type,
                priority=issue.priority if issue.priority is not None else DEFAULT_PRIORITY,
                blocked_by_count=issue.blocked_by_count,
                has_children=bool(children),
                depth=depth,
                parent_id=parent_id,
            )
        )
        # Reversed so the first child is popped (and emitted) first
        for child_id in reversed(children):
            stack.append((child_id, depth + 1, node_id))


def resolve_hierarchy(issues: Iterable[Issue]) -> HierarchyResolution:
    issue_map = _index_issues(active_issues(issues))

    parent_map: dict[str, str] = {}
    children_map: defaultdict[str, list[str]] = defaultdict(list)
    for issue in issue_map.values():
        parent_id = resolve_parent(issue.id, issue.dependencies, issue_map)
        if parent_id is not None:
            parent_map[issue.id] = parent_id
            children_map[parent_id].append(issue.id)

    for child_ids in children_map.values():
        child_ids.sort(key=lambda cid: tree_sort_key(issue_map[cid]))

    roots = sorted((i for i in issue_map.values() if i.id not in parent_map), key=tree_sort_key)

    nodes: list[TreeNode] = []
    visited: set[str] = set()
    for root in roots:
        _emit_preorder(root.id, issue_map, children_map, visited, nodes)

    unreached = sorted((i for i in issue_map.values() if i.id not in visited), key=tree_sort_key)
    cyclic_ids = {i.id for i in unreached}
    if unreached:
        logger.warning(
            "Cyclic structure in parent links; promoting to roots: %s",
            ", ".join(sorted(cyclic_ids)),
        )
    for issue in unreached:
        if issue.id not in visited:
            _emit_preorder(issue.id, issue_map, children_map, visited, nodes)

    return HierarchyResolution(nodes=nodes, cyclic_ids=cyclic_ids)


def build_issue_tree(issues: Iterable[Issue]) -> list[TreeNode]:
    """Pre-order tree nodes for indented rendering (tombstones excluded)."""
    return resolve_hierarchy(issues).nodes
