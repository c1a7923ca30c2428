import logging
from datetime import UTC, datetime, timedelta

import pytest

from beads_app.core.beads_client import BeadsCLI
from beads_app.core.errors import NotFoundError, UpstreamFailure
from beads_app.core.models import Activity, Dependency, DependencyType, Issue, IssueType, Status
from beads_app.core.service import IssueService

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)


def _make_issue(issue_id, *, status=Status.OPEN, issue_type=IssueType.TASK, deps=(), closed=None):
    return Issue(
        id=issue_id,
        title=issue_id,
        status=status,
        issue_type=issue_type,
        created_at=NOW - timedelta(days=2),
        updated_at=NOW - timedelta(days=1),
        closed_at=closed,
        dependencies=tuple(Dependency(issue_id, target, dep_type) for target, dep_type in deps),
    )


class DummyCLI(BeadsCLI):
    def __init__(self, *, fail=()):
        super().__init__("bd-dummy")
        self.fail = set(fail)
        self.issues = [
            _make_issue("E", issue_type=IssueType.EPIC),
            _make_issue("E.1", status=Status.CLOSED, closed=NOW - timedelta(hours=2)),
            _make_issue("E.2", status=Status.IN_PROGRESS, deps=[("E.1", DependencyType.BLOCKS)]),
            _make_issue("T", status=Status.TOMBSTONE, deps=[("E", DependencyType.BLOCKS)]),
        ]

    def _maybe_fail(self, name):
        if name in self.fail:
            raise UpstreamFailure(f"{name} failed: boom")

    def list_issues(self):
        self._maybe_fail("issues")
        return list(self.issues)

    def list_dependencies(self):
        self._maybe_fail("dependencies")
        return super().list_dependencies()

    def get_activity(self):
        self._maybe_fail("activity")
        return [
            Activity(
                timestamp=NOW - timedelta(hours=3),
                issue_id="E.1",
                old_status=Status.OPEN,
                new_status=Status.IN_PROGRESS,
            )
        ]

    def get_status_summary(self):
        self._maybe_fail("summary")
        return {"summary": {"average_lead_time_hours": 5.0}}


def test_fetch_metrics_inputs_all_ok():
    issues, activities, summary = IssueService(DummyCLI()).fetch_metrics_inputs()
    assert len(issues) == 4
    assert len(activities) == 1
    assert summary["summary"]["average_lead_time_hours"] == 5.0


def test_activity_and_summary_failures_degrade(caplog):
    svc = IssueService(DummyCLI(fail={"activity", "summary"}))
    with caplog.at_level(logging.WARNING):
        issues, activities, summary = svc.fetch_metrics_inputs()
    assert len(issues) == 4
    assert activities == []
    assert summary is None
    assert "Activity fetch failed" in caplog.text
    assert "Status summary fetch failed" in caplog.text


def test_issue_failure_propagates():
    svc = IssueService(DummyCLI(fail={"issues", "activity"}))
    with pytest.raises(UpstreamFailure, match="issues failed"):
        svc.fetch_metrics_inputs()


def test_metrics_view_model():
    ctx = IssueService(DummyCLI()).metrics(now=NOW)
    assert ctx.summary.avg_lead_time_hours == 5.0
    assert ctx.summary.wip_count == 1
    assert ctx.summary.closed_last_7_days == 1
    # Cycle time of E.1 is 60 minutes: not above an hour, so minutes
    assert ctx.summary.cycle_time_unit.suffix == "m"
    assert ctx.summary.p50_cycle_time == 60
    assert len(ctx.tickets_chart.labels) == 8
    assert ctx.heatmap.max_value >= 1
    payload = ctx.to_dict()
    assert payload["cycle_time_unit"] == "m"
    assert len(payload["heatmap"]["cells"]) == 7


def test_metrics_window_is_configurable():
    ctx = IssueService(DummyCLI(), trend_window_days=14).metrics(now=NOW)
    assert len(ctx.throughput_chart.labels) == 14


def test_graph_excludes_tombstones():
    graph = IssueService(DummyCLI()).graph()
    assert {n.id for n in graph.nodes} == {"E", "E.1", "E.2"}
    assert {(e.source, e.target, e.edge_type) for e in graph.edges} == {
        ("E.1", "E", "parent-child"),
        ("E.2", "E", "parent-child"),
        ("E.2", "E.1", "blocks"),
    }


def test_graph_without_dependencies_still_has_nodes(caplog):
    svc = IssueService(DummyCLI(fail={"dependencies"}))
    with caplog.at_level(logging.WARNING):
        graph = svc.graph()
    assert len(graph.nodes) == 3
    # Only implicit dot-notation edges remain
    assert {e.edge_type for e in graph.edges} == {"parent-child"}
    assert "Dependency fetch failed" in caplog.text


def test_graph_layout_levels():
    layout = IssueService(DummyCLI()).graph_layout()
    assert layout.levels == {"E": 0, "E.1": 1, "E.2": 2}


def test_tree_board_epics_landing():
    svc = IssueService(DummyCLI())
    assert [(n.id, n.depth) for n in svc.task_tree()] == [("E", 0), ("E.2", 1), ("E.1", 1)]
    assert [len(c.issues) for c in svc.board()] == [1, 1, 0, 0, 1]
    epics = svc.epics()
    assert [(e.issue.id, e.total, e.closed) for e in epics] == [("E", 2, 1)]
    assert svc.epic_detail("E").percent == 50.0
    with pytest.raises(NotFoundError):
        svc.epic_detail("E.1")
    assert svc.landing().stats.total == 3
    assert svc.task_detail("E").can_expand is False
    assert list(svc.fetch_dataframe()["id"]) == ["E", "E.1", "E.2"]


def test_view_errors_surface_as_upstream_failure():
    svc = IssueService(DummyCLI(fail={"issues"}))
    with pytest.raises(UpstreamFailure):
        svc.task_tree()
