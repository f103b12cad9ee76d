"""CLI entrypoint for the issues dashboard.

Commands:
- `sync`: copy an organization's repository issues from GitHub into the store
- `issues`: print the issue summaries the dashboard would show, as JSON

The web server is started with any ASGI server, e.g.
`uvicorn --factory issues_dashboard.server.app:create_app`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from issues_dashboard import __version__
from issues_dashboard.config import DashboardSettings
from issues_dashboard.context import RequestContext
from issues_dashboard.errors import IssuesDashboardError
from issues_dashboard.github.client import GitHubClient
from issues_dashboard.github.sync import IssueSyncer
from issues_dashboard.logging import configure_logging
from issues_dashboard.server.app import build_resolver
from issues_dashboard.storage.store import JsonEntityStore
from issues_dashboard.topics.issues.resolver import ProjectionPolicy, ScanFilter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issues-dashboard",
        description="Operational dashboard listing repository issues",
    )
    parser.add_argument("--version", action="version", version=f"issues-dashboard {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Copy issues from GitHub into the local store")
    sync.add_argument(
        "--org",
        default=None,
        help="Organization login (defaults to ISSUES_DASHBOARD_DEFAULT_ORG)",
    )
    sync.add_argument(
        "--repo",
        default=None,
        help="Repository name (defaults to ISSUES_DASHBOARD_REPO_NAME)",
    )

    issues = subparsers.add_parser("issues", help="Print issue summaries as JSON")
    issues.add_argument(
        "--org",
        default=None,
        help="Organization login (defaults to ISSUES_DASHBOARD_API_DEFAULT_ORG)",
    )
    issues.add_argument(
        "--projection",
        choices=[p.value for p in ProjectionPolicy],
        default=None,
        help="Override ISSUES_DASHBOARD_PROJECTION",
    )
    issues.add_argument(
        "--scan-filter",
        choices=[f.value for f in ScanFilter],
        default=None,
        help="Override ISSUES_DASHBOARD_SCAN_FILTER",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = DashboardSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "sync":
            if not settings.github_token.strip():
                print("ISSUES_DASHBOARD_GITHUB_TOKEN is required for sync", file=sys.stderr)
                return 2

            github = GitHubClient(token=settings.github_token, base_url=settings.github_base_url)
            try:
                syncer = IssueSyncer(github=github, store=JsonEntityStore(settings.state_path))
                report = syncer.sync(
                    args.org or settings.default_org,
                    args.repo or settings.repo_name,
                )
            finally:
                github.close()
            print(
                f"Synced {report.issue_count} issues and {report.user_count} users "
                f"from {report.org_login}/{report.repo_name}"
            )
            return 0

        if args.command == "issues":
            updates: dict[str, object] = {}
            if args.projection:
                updates["projection"] = ProjectionPolicy(args.projection)
            if args.scan_filter:
                updates["scan_filter"] = ScanFilter(args.scan_filter)
            effective = settings.model_copy(update=updates)

            resolver = build_resolver(effective)
            summaries = resolver.resolve(
                RequestContext.with_timeout(effective.request_timeout_seconds),
                args.org or effective.api_default_org,
            )
            payload = [s.model_dump(mode="json") for s in summaries]
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except IssuesDashboardError as e:
        logger.warning(e.message, extra={"status": e.status_code})
        print(f"Error {e.status_code}: {e.message}", file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
