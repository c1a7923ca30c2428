import logging
from datetime import UTC, datetime

from beads_app.analytics.graph.builder import GraphData, GraphEdge, GraphNode, build_graph_data
from beads_app.analytics.graph.layout import assign_levels, layout_graph
from beads_app.core.models import Dependency, DependencyType, Issue, IssueType, Status

T0 = datetime(2024, 3, 1, tzinfo=UTC)


def _make_issue(issue_id, deps=(), *, status=Status.OPEN, issue_type=IssueType.TASK, priority=None):
    return Issue(
        id=issue_id,
        title=f"Issue {issue_id}",
        status=status,
        issue_type=issue_type,
        created_at=T0,
        updated_at=T0,
        priority=priority,
        dependencies=tuple(Dependency(issue_id, target, dep_type) for target, dep_type in deps),
    )


def _build(issues):
    deps = [d for i in issues for d in i.dependencies]
    return build_graph_data(issues, deps)


def _graph(node_ids, edges):
    return GraphData(
        nodes=[GraphNode(i, i, "task", "open", 2) for i in node_ids],
        edges=[GraphEdge(src, dst, "blocks") for src, dst in edges],
    )


def test_duplicate_blocks_edges_collapse():
    issues = [
        _make_issue("A"),
        _make_issue("B", [("A", DependencyType.BLOCKS), ("A", DependencyType.BLOCKS)]),
    ]
    graph = _build(issues)
    assert [e.to_dict() for e in graph.edges] == [{"from": "B", "to": "A", "type": "blocks"}]


def test_same_endpoints_different_types_are_kept():
    issues = [
        _make_issue("A"),
        _make_issue("B", [("A", DependencyType.BLOCKS), ("A", DependencyType.RELATED)]),
    ]
    assert {e.edge_type for e in _build(issues).edges} == {"blocks", "related"}


def test_dot_parent_emits_implicit_edge():
    graph = _build([_make_issue("X"), _make_issue("X.1")])
    assert graph.edges == [GraphEdge("X.1", "X", "parent-child")]
    nodes = {n.id: n for n in graph.nodes}
    assert nodes["X.1"].parent == "X"
    assert nodes["X"].parent is None


def test_explicit_parent_wins_over_dot_prefix():
    issues = [
        _make_issue("X"),
        _make_issue("P", issue_type=IssueType.EPIC),
        _make_issue("X.1", [("P", DependencyType.PARENT_CHILD)]),
    ]
    graph = _build(issues)
    assert {n.id: n.parent for n in graph.nodes}["X.1"] == "P"
    assert graph.edges == [GraphEdge("X.1", "P", "parent-child")]


def test_explicit_and_implicit_parent_edge_deduplicated():
    issues = [_make_issue("X"), _make_issue("X.1", [("X", DependencyType.PARENT_CHILD)])]
    assert _build(issues).edges == [GraphEdge("X.1", "X", "parent-child")]


def test_edges_to_inactive_endpoints_dropped():
    issues = [_make_issue("A"), _make_issue("B", [("gone", DependencyType.BLOCKS), ("A", DependencyType.WAITS_FOR)])]
    graph = _build(issues)
    assert [(e.source, e.target) for e in graph.edges] == [("B", "A")]


def test_node_fields():
    graph = _build([_make_issue("M", issue_type=IssueType.MERGE_REQUEST, status=Status.IN_PROGRESS)])
    node = graph.to_dict()["nodes"][0]
    assert node == {
        "id": "M",
        "title": "Issue M",
        "issue_type": "merge-request",
        "status": "in_progress",
        "priority": 2,
        "parent": None,
    }


def test_chain_levels():
    levels = assign_levels(_graph(["A", "B", "C"], [("B", "A"), ("C", "B")])).levels
    assert levels == {"A": 0, "B": 1, "C": 2}


def test_diamond_takes_longest_path():
    graph = _graph(["A", "B", "C", "D"], [("B", "A"), ("C", "A"), ("D", "B"), ("D", "C"), ("D", "A")])
    assert assign_levels(graph).levels == {"A": 0, "B": 1, "C": 1, "D": 2}


def test_cycle_nodes_get_terminal_level(caplog):
    graph = _graph(["A", "B", "C"], [("A", "B"), ("B", "A")])
    with caplog.at_level(logging.WARNING):
        result = assign_levels(graph)
    assert result.levels == {"C": 0, "A": 1, "B": 1}
    assert result.cyclic_ids == {"A", "B"}
    assert result.order == ["C", "A", "B"]
    assert "Cyclic structure" in caplog.text


def test_all_cyclic_lands_on_level_zero():
    result = assign_levels(_graph(["A", "B"], [("A", "B"), ("B", "A")]))
    assert result.levels == {"A": 0, "B": 0}


def test_layout_centers_rows_and_routes_edges():
    layout = layout_graph(_graph(["A", "B"], [("B", "A")]))
    assert (layout.width, layout.height) == (220, 232)
    pos = {n.id: (n.x, n.y, n.level) for n in layout.nodes}
    assert pos == {"A": (20, 20, 0), "B": (20, 156, 1)}
    edge = layout.edges[0]
    assert (edge.x1, edge.y1, edge.x2, edge.y2) == (110, 76, 110, 156)


def test_layout_row_order_follows_dequeue_order():
    layout = layout_graph(_graph(["A", "B", "C"], [("C", "A"), ("C", "B")]))
    assert layout.width == 440
    top = [(n.id, n.x) for n in layout.nodes if n.level == 0]
    assert top == [("A", 20), ("B", 240)]
    # Narrower second row is centered
    assert [(n.id, n.x) for n in layout.nodes if n.level == 1] == [("C", 130)]


def test_empty_graph_layout():
    layout = layout_graph(GraphData())
    assert layout.nodes == [] and layout.edges == []
    assert layout.levels == {}


def test_layout_to_dict_uses_wire_edge_keys():
    payload = layout_graph(_graph(["A", "B"], [("A", "B"), ("B", "A")])).to_dict()
    assert payload["cyclic_ids"] == ["A", "B"]
    assert {k for k in payload["edges"][0]} >= {"from", "to", "type"}
    assert payload["nodes"][0]["level"] == 0
