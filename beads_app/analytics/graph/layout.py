"""Topological leveling and box layout for the dependency graph.

Edges are read as blocker -> dependent (``edge.target`` -> ``edge.source``).
Levels come from Kahn's algorithm with a FIFO queue; nodes left over after the
queue drains sit on a cycle and are parked on one extra terminal level.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import asdict, dataclass, field

from beads_app.core.config import (
    GRAPH_LEVEL_GAP,
    GRAPH_MARGIN,
    GRAPH_NODE_GAP,
    GRAPH_NODE_HEIGHT,
    GRAPH_NODE_WIDTH,
)

from .builder import GraphData, GraphNode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LevelAssignment:
    levels: dict[str, int]
    # Dequeue order, cyclic leftovers appended in node order
    order: list[str]
    cyclic_ids: set[str] = field(default_factory=set)


@dataclass(slots=True, frozen=True)
class LayoutNode:
    id: str
    title: str
    status: str
    issue_type: str
    parent: str | None
    level: int
    x: int
    y: int


@dataclass(slots=True, frozen=True)
class LayoutEdge:
    source: str
    target: str
    edge_type: str
    x1: int
    y1: int
    x2: int
    y2: int


@dataclass(slots=True)
class GraphLayout:
    nodes: list[LayoutNode]
    edges: list[LayoutEdge]
    width: int
    height: int
    cyclic_ids: set[str] = field(default_factory=set)

    @property
    def levels(self) -> dict[str, int]:
        return {n.id: n.level for n in self.nodes}

    def to_dict(self) -> dict:
        return {
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [
                {"from": e.source, "to": e.target, "type": e.edge_type, "x1": e.x1, "y1": e.y1, "x2": e.x2, "y2": e.y2}
                for e in self.edges
            ],
            "width": self.width,
            "height": self.height,
            "cyclic_ids": sorted(self.cyclic_ids),
        }


def assign_levels(graph: GraphData) -> LevelAssignment:
    node_ids = list(dict.fromkeys(node.id for node in graph.nodes))
    known = set(node_ids)

    in_degree = dict.fromkeys(node_ids, 0)
    dependents: defaultdict[str, list[str]] = defaultdict(list)
    for edge in graph.edges:
        if edge.source not in known or edge.target not in known:
            continue
        dependents[edge.target].append(edge.source)
        in_degree[edge.source] += 1

    levels: dict[str, int] = {}
    queue: deque[str] = deque()
    for node_id in node_ids:
        if in_degree[node_id] == 0:
            levels[node_id] = 0
            queue.append(node_id)

    order: list[str] = []
    while queue:
        current = queue.popleft()
        order.append(current)
        for dependent in dependents.get(current, ()):
            levels[dependent] = max(levels.get(dependent, 0), levels[current] + 1)
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    dequeued = set(order)
    cyclic = [node_id for node_id in node_ids if node_id not in dequeued]
    if cyclic:
        terminal = max((levels[n] for n in order), default=-1) + 1
        logger.warning(
            "Cyclic structure in dependency graph; %d node(s) placed on level %d",
            len(cyclic),
            terminal,
        )
        for node_id in cyclic:
            levels[node_id] = terminal
            order.append(node_id)
    return LevelAssignment(levels=levels, order=order, cyclic_ids=set(cyclic))


def layout_graph(
    graph: GraphData,
    *,
    node_width: int = GRAPH_NODE_WIDTH,
    node_height: int = GRAPH_NODE_HEIGHT,
    node_gap: int = GRAPH_NODE_GAP,
    level_gap: int = GRAPH_LEVEL_GAP,
    margin: int = GRAPH_MARGIN,
) -> GraphLayout:
    """Position nodes level by level, each row centered in the canvas."""
    assignment = assign_levels(graph)
    rows: defaultdict[int, list[str]] = defaultdict(list)
    for node_id in assignment.order:
        rows[assignment.levels[node_id]].append(node_id)

    level_count = max(rows) + 1 if rows else 0
    widest = max((len(r) for r in rows.values()), default=0)
    width = 2 * margin + widest * node_width + max(widest - 1, 0) * node_gap
    height = 2 * margin + level_count * node_height + max(level_count - 1, 0) * level_gap

    positions: dict[str, tuple[int, int]] = {}
    for level in range(level_count):
        ids = rows.get(level, [])
        row_width = len(ids) * node_width + max(len(ids) - 1, 0) * node_gap
        start_x = (width - row_width) // 2
        y = margin + level * (node_height + level_gap)
        for idx, node_id in enumerate(ids):
            positions[node_id] = (start_x + idx * (node_width + node_gap), y)

    by_id: dict[str, GraphNode] = {}
    for node in graph.nodes:
        by_id.setdefault(node.id, node)

    nodes = [
        LayoutNode(
            id=node_id,
            title=by_id[node_id].title,
            status=by_id[node_id].status,
            issue_type=by_id[node_id].issue_type,
            parent=by_id[node_id].parent,
            level=assignment.levels[node_id],
            x=positions[node_id][0],
            y=positions[node_id][1],
        )
        for node_id in assignment.order
    ]

    edges: list[LayoutEdge] = []
    half = node_width // 2
    for edge in graph.edges:
        if edge.source not in positions or edge.target not in positions:
            continue
        bx, by = positions[edge.target]
        dx, dy = positions[edge.source]
        edges.append(
            LayoutEdge(
                source=edge.source,
                target=edge.target,
                edge_type=edge.edge_type,
                x1=bx + half,
                y1=by + node_height,
                x2=dx + half,
                y2=dy,
            )
        )

    return GraphLayout(
        nodes=nodes,
        edges=edges,
        width=width,
        height=height,
        cyclic_ids=assignment.cyclic_ids,
    )
