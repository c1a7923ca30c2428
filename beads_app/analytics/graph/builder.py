"""Dependency graph construction (nodes + deduplicated typed edges)."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field

from beads_app.analytics.hierarchy.tree import resolve_parent
from beads_app.core.config import DEFAULT_PRIORITY
from beads_app.core.models import Dependency, DependencyType, Issue


@dataclass(slots=True, frozen=True)
class GraphNode:
    id: str
    title: str
    issue_type: str
    status: str
    priority: int
    # Primary parent for hierarchical positioning
    parent: str | None = None

    @classmethod
    def from_issue(cls, issue: Issue, parent_id: str | None) -> GraphNode:
        return cls(
            id=issue.id,
            title=issue.title,
            issue_type=issue.issue_type.css_class,
            status=issue.status.value,
            priority=issue.priority if issue.priority is not None else DEFAULT_PRIORITY,
            parent=parent_id,
        )


@dataclass(slots=True, frozen=True)
class GraphEdge:
    # from: the dependent/child issue, to: the blocking/parent issue
    source: str
    target: str
    edge_type: str

    def to_dict(self) -> dict[str, str]:
        return {"from": self.source, "to": self.target, "type": self.edge_type}


@dataclass(slots=True)
class GraphData:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


def build_graph_data(issues: Iterable[Issue], all_dependencies: Iterable[Dependency]) -> GraphData:
    """Build graph data from active issues and the full dependency list.

    ``issues`` should already exclude tombstones; dependencies may reference
    issues outside that set and such edges are dropped.
    """
    issues = list(issues)
    id_set = {i.id for i in issues}

    deps_by_issue: defaultdict[str, list[Dependency]] = defaultdict(list)
    for dep in all_dependencies:
        deps_by_issue[dep.issue_id].append(dep)

    graph = GraphData()
    seen_edges: set[tuple[str, str, str]] = set()

    def add_edge(source: str, target: str, edge_type: str) -> None:
        key = (source, target, edge_type)
        if key in seen_edges:
            return
        seen_edges.add(key)
        graph.edges.append(GraphEdge(source, target, edge_type))

    for issue in issues:
        explicit = deps_by_issue.get(issue.id, [])
        parent_id = resolve_parent(issue.id, explicit, id_set)
        if parent_id is not None and parent_id == issue.dot_parent_id:
            add_edge(issue.id, parent_id, DependencyType.PARENT_CHILD.value)

        for dep in explicit:
            if dep.depends_on_id not in id_set:
                continue
            add_edge(issue.id, dep.depends_on_id, dep.dep_type.value)

        graph.nodes.append(GraphNode.from_issue(issue, parent_id))

    return graph
