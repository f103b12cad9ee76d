"""Errors surfaced by the dashboard topics.

Every error carries the HTTP status code the dashboard reports for it. Topics
raise these from their resolution logic; the HTTP layer only translates them.
"""

from __future__ import annotations


class IssuesDashboardError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LookupFailure(IssuesDashboardError):
    """A cache or store lookup could not be completed."""

    status_code = 500


class NotFound(IssuesDashboardError):
    """The organization or repository definitively does not exist."""

    status_code = 404


class ScanFailure(IssuesDashboardError):
    """Iterating issues from the store failed part-way."""

    status_code = 500


class RequestCancelled(IssuesDashboardError):
    """The request was cancelled or ran past its deadline."""

    status_code = 503
