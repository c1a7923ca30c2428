import json
import sys

import pytest

from beads_app.core.beads_client import BeadsCLI
from beads_app.core.errors import NotFoundError, UpstreamFailure


class ScriptedCLI(BeadsCLI):
    """Returns canned stdout per subcommand instead of spawning ``bd``."""

    def __init__(self, outputs):
        super().__init__("bd-test")
        self.outputs = outputs
        self.calls = []

    def _run(self, *args):
        self.calls.append(args)
        return self.outputs[args[0]]


def _export_lines():
    records = [
        {
            "id": "bd-1",
            "title": "Epic",
            "status": "open",
            "issue_type": "epic",
            "created_at": "2024-03-01T00:00:00Z",
        },
        {
            "id": "bd-2",
            "title": "Child",
            "status": "closed",
            "issue_type": "task",
            "created_at": "2024-03-01T00:00:00Z",
            "closed_at": "2024-03-02T00:00:00Z",
            "dependencies": [{"depends_on_id": "bd-1", "type": "parent-child"}],
        },
    ]
    return "\n".join(json.dumps(r) for r in records) + "\n\n"


def test_list_issues_parses_json_lines():
    cli = ScriptedCLI({"export": _export_lines()})
    issues = cli.list_issues()
    assert [i.id for i in issues] == ["bd-1", "bd-2"]
    assert issues[1].closed_at is not None
    assert cli.calls == [("export",)]


def test_list_dependencies_flattens_embedded_edges():
    cli = ScriptedCLI({"export": _export_lines()})
    deps = cli.list_dependencies()
    assert len(deps) == 1
    assert (deps[0].issue_id, deps[0].depends_on_id) == ("bd-2", "bd-1")


def test_get_issue_not_found():
    cli = ScriptedCLI({"export": _export_lines()})
    assert cli.get_issue("bd-2").title == "Child"
    with pytest.raises(NotFoundError) as excinfo:
        cli.get_issue("bd-99")
    assert excinfo.value.what == "bd-99"


def test_activity_and_status_payloads():
    cli = ScriptedCLI(
        {
            "activity": json.dumps([{"timestamp": "2024-03-04T10:00:00Z", "issue_id": "bd-1", "type": "status"}]),
            "status": json.dumps({"summary": {"average_lead_time_hours": 3.5}}),
        }
    )
    assert cli.get_activity()[0].issue_id == "bd-1"
    assert cli.get_status_summary()["summary"]["average_lead_time_hours"] == 3.5


def test_unexpected_payload_shapes_raise_upstream_failure():
    cli = ScriptedCLI({"activity": "{}", "status": "[]", "export": "{not json"})
    with pytest.raises(UpstreamFailure):
        cli.get_activity()
    with pytest.raises(UpstreamFailure):
        cli.get_status_summary()
    with pytest.raises(UpstreamFailure, match="Failed to parse"):
        cli.list_issues()


def test_missing_binary_raises_upstream_failure():
    cli = BeadsCLI("/nonexistent/path/to/bd")
    with pytest.raises(UpstreamFailure, match="Command execution failed"):
        cli.list_issues()


def test_nonzero_exit_carries_stderr():
    cli = BeadsCLI(sys.executable)
    with pytest.raises(UpstreamFailure, match="boom"):
        cli._run("-c", "import sys; sys.stderr.write('boom'); sys.exit(3)")
