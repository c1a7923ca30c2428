"""Error taxonomy shared by the client, services and pages."""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for errors surfaced to a dashboard view."""


class NotFoundError(DashboardError):
    """A referenced issue (or epic) is absent from the snapshot."""

    def __init__(self, what: str):
        super().__init__(f"Not found: {what}")
        self.what = what


class BadRequestError(DashboardError):
    """Malformed caller input, e.g. an empty issue id."""

    def __init__(self, message: str):
        super().__init__(f"Bad request: {message}")


class UpstreamFailure(DashboardError):
    """The issue store call failed; the upstream message is passed through."""
