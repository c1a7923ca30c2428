"""Thin wrapper around the ``bd`` CLI (export, activity, status)."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

from .config import DEFAULT_BD_BIN
from .errors import NotFoundError, UpstreamFailure
from .mappers import map_activities, map_issues
from .models import Activity, Dependency, Issue

logger = logging.getLogger(__name__)


class BeadsCLI:
    def __init__(self, bin_path: str = DEFAULT_BD_BIN):
        self.bin_path = bin_path

    def _run(self, *args: str) -> str:
        cmd = [self.bin_path, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise UpstreamFailure(f"Command execution failed: {exc}") from exc
        if proc.returncode != 0:
            message = (proc.stderr or "").strip() or f"exit status {proc.returncode}"
            raise UpstreamFailure(f"{' '.join(args)} failed: {message}")
        return proc.stdout

    def _run_json(self, *args: str) -> Any:
        out = self._run(*args)
        try:
            return json.loads(out)
        except json.JSONDecodeError as exc:
            raise UpstreamFailure(f"Failed to parse response: {exc}") from exc

    def export_raw(self) -> list[dict[str, Any]]:
        """Raw export records, one JSON object per non-blank line."""
        records = []
        for line in self._run("export").splitlines():
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise UpstreamFailure(f"Failed to parse response: {exc}") from exc
        return records

    def list_issues(self) -> list[Issue]:
        return map_issues(self.export_raw())

    def list_dependencies(self) -> list[Dependency]:
        """Every dependency embedded in the export, tombstoned issues included."""
        return [dep for issue in self.list_issues() for dep in issue.dependencies]

    def get_issue(self, issue_id: str) -> Issue:
        for issue in self.list_issues():
            if issue.id == issue_id:
                return issue
        raise NotFoundError(issue_id)

    def get_activity(self) -> list[Activity]:
        data = self._run_json("activity", "--json")
        if not isinstance(data, list):
            raise UpstreamFailure(f"Unexpected activity payload type: {type(data)!r}")
        return map_activities(data)

    def get_status_summary(self) -> dict[str, Any]:
        data = self._run_json("status", "--json")
        if not isinstance(data, dict):
            raise UpstreamFailure(f"Unexpected status payload type: {type(data)!r}")
        return data
