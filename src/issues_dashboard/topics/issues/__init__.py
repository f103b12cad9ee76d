"""Issues topic."""

from __future__ import annotations

from issues_dashboard.topics.issues.resolver import (
    DisplayIssueSummary,
    IssueSummary,
    IssueSummaryResolver,
    ProjectionPolicy,
    RawIssueSummary,
    ScanFilter,
    display_name,
)

__all__ = [
    "DisplayIssueSummary",
    "IssueSummary",
    "IssueSummaryResolver",
    "ProjectionPolicy",
    "RawIssueSummary",
    "ScanFilter",
    "display_name",
]
