"""IssueService: orchestrates fetching from ``bd`` and building view models."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any

import pandas as pd
import pytz

from beads_app.analytics.aggregations.epics import EpicProgress, epic_detail, list_epics
from beads_app.analytics.aggregations.stats import BoardColumn, LandingData, board_columns
from beads_app.analytics.graph.builder import GraphData, build_graph_data
from beads_app.analytics.graph.layout import GraphLayout, layout_graph
from beads_app.analytics.hierarchy.tree import TreeNode, build_issue_tree
from beads_app.features.metrics_overview.context import MetricsContext, build_metrics_context
from beads_app.features.task_views.context import (
    TaskDetailContext,
    build_landing_context,
    build_task_detail,
)

from .beads_client import BeadsCLI
from .config import TIMEZONE, TREND_WINDOW_DAYS
from .errors import UpstreamFailure
from .mappers import issues_to_dataframe
from .models import Activity, Dependency, Issue
from .status import active_issues

logger = logging.getLogger(__name__)


class IssueService:
    def __init__(self, client: BeadsCLI, *, timezone: str = TIMEZONE, trend_window_days: int = TREND_WINDOW_DAYS):
        self.client = client
        self._tz = pytz.timezone(timezone)
        self._window_days = trend_window_days

    # ------------------ Fetch Methods ------------------
    def fetch_issues(self) -> list[Issue]:
        return self.client.list_issues()

    def fetch_dataframe(self) -> pd.DataFrame:
        return issues_to_dataframe(active_issues(self.fetch_issues()))

    def fetch_metrics_inputs(self) -> tuple[list[Issue], list[Activity], dict[str, Any] | None]:
        """Fetch issues, activity and the status summary concurrently.

        Activity and summary failures degrade to ``[]`` / ``None``; an issue
        list failure propagates as :class:`UpstreamFailure`.
        """
        with ThreadPoolExecutor(max_workers=3) as pool:
            issues_fut = pool.submit(self.client.list_issues)
            activity_fut = pool.submit(self.client.get_activity)
            summary_fut = pool.submit(self.client.get_status_summary)

            activities: list[Activity] = []
            try:
                activities = activity_fut.result()
            except Exception as exc:
                logger.warning("Activity fetch failed: %s", exc)

            summary: dict[str, Any] | None = None
            try:
                summary = summary_fut.result()
            except Exception as exc:
                logger.warning("Status summary fetch failed: %s", exc)

            try:
                issues = issues_fut.result()
            except UpstreamFailure:
                raise
            except Exception as exc:
                raise UpstreamFailure(f"Issue list fetch failed: {exc}") from exc
        return issues, activities, summary

    def _fetch_dependencies(self) -> list[Dependency]:
        try:
            return self.client.list_dependencies()
        except Exception as exc:
            logger.warning("Dependency fetch failed; rendering graph without edges: %s", exc)
            return []

    # ------------------ View Models ------------------
    def metrics(self, *, now: datetime | None = None) -> MetricsContext:
        issues, activities, summary = self.fetch_metrics_inputs()
        return build_metrics_context(
            issues,
            activities,
            summary,
            now=now,
            tz=self._tz,
            window_days=self._window_days,
        )

    def task_tree(self) -> list[TreeNode]:
        return build_issue_tree(self.fetch_issues())

    def task_detail(self, issue_id: str) -> TaskDetailContext:
        return build_task_detail(issue_id, self.fetch_issues())

    def graph(self) -> GraphData:
        issues = active_issues(self.fetch_issues())
        return build_graph_data(issues, self._fetch_dependencies())

    def graph_layout(self) -> GraphLayout:
        return layout_graph(self.graph())

    def epics(self) -> list[EpicProgress]:
        return list_epics(active_issues(self.fetch_issues()))

    def epic_detail(self, epic_id: str) -> EpicProgress:
        return epic_detail(epic_id, active_issues(self.fetch_issues()))

    def landing(self) -> LandingData:
        return build_landing_context(self.fetch_issues())

    def board(self) -> list[BoardColumn]:
        return board_columns(self.fetch_issues())
