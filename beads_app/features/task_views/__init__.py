"""Task views feature module: task tree drill-down and landing summaries."""

from beads_app.features.task_views.context import (
    TaskDetailContext,
    build_landing_context,
    build_task_detail,
    build_task_subtree,
)

__all__ = [
    "TaskDetailContext",
    "build_landing_context",
    "build_task_detail",
    "build_task_subtree",
]
