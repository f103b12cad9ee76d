"""Configuration for the issues dashboard.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The dashboard can start without a GitHub token. Only the `sync` command talks to
GitHub, and it validates the token when it runs.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from issues_dashboard.topics.issues.resolver import ProjectionPolicy, ScanFilter


class DashboardSettings(BaseSettings):
    """Settings for the dashboard server and CLI.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `DashboardSettings(_env_file=path_to_env)`.
    """

    default_org: str = Field(
        default="istio",
        validation_alias="ISSUES_DASHBOARD_DEFAULT_ORG",
        description="Organization shown by the HTML view when no ?org= is given",
    )
    api_default_org: str = Field(
        default="istio",
        validation_alias="ISSUES_DASHBOARD_API_DEFAULT_ORG",
        description="Organization returned by the JSON API when no ?org= is given",
    )
    repo_name: str = Field(
        default="istio",
        validation_alias="ISSUES_DASHBOARD_REPO_NAME",
        description="Repository listed for the selected organization",
    )

    projection: ProjectionPolicy = Field(
        default=ProjectionPolicy.DISPLAY,
        validation_alias="ISSUES_DASHBOARD_PROJECTION",
        description=(
            "'display' resolves authors/assignees to logins and shortens titles; "
            "'passthrough' returns the raw IDs for consumers that resolve them themselves."
        ),
    )
    scan_filter: ScanFilter = Field(
        default=ScanFilter.OPEN,
        validation_alias="ISSUES_DASHBOARD_SCAN_FILTER",
        description="'open' lists only non-closed issues; 'all' lists every issue.",
    )

    state_path: Path = Field(
        default=Path("dashboard_state"),
        validation_alias="ISSUES_DASHBOARD_STATE_PATH",
        description="Directory holding the JSON entity store",
    )
    cache_ttl_seconds: float = Field(
        default=300.0,
        validation_alias="ISSUES_DASHBOARD_CACHE_TTL_SECONDS",
        description="How long organization/repository/user lookups stay cached (0 disables)",
        ge=0,
    )
    cache_max_entries: int = Field(
        default=10_000,
        validation_alias="ISSUES_DASHBOARD_CACHE_MAX_ENTRIES",
        description="Upper bound on cached lookups; the oldest entries are evicted first",
        ge=1,
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias="ISSUES_DASHBOARD_REQUEST_TIMEOUT_SECONDS",
        description="Deadline for resolving one request",
        gt=0,
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    github_token: str = Field(default="", validation_alias="ISSUES_DASHBOARD_GITHUB_TOKEN")
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")
