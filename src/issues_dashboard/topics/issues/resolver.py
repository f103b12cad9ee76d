"""Issue summary resolution.

Turns an organization login into the list of issue summaries shown by the
issues topic:

1. organization login -> organization (via the cache)
2. (organization, configured repository name) -> repository (via the cache)
3. scan the repository's issues from the store
4. project every issue into a summary, in store order

Organization and repository lookups distinguish "could not look it up" (500)
from "does not exist" (404). Author and assignee lookups never fail the
request: anything that does not resolve is shown as ``unknown``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, Field

from issues_dashboard.context import RequestContext
from issues_dashboard.errors import IssuesDashboardError, LookupFailure, NotFound, ScanFailure
from issues_dashboard.storage.cache import Failed, Found, Lookup, ResolutionCache
from issues_dashboard.storage.models import Issue
from issues_dashboard.storage.store import EntityStore, IssuePredicate, all_issues, open_issues

logger = logging.getLogger(__name__)

UNKNOWN_USER = "unknown"
TITLE_MAX_LENGTH = 50
TITLE_ELLIPSIS = ". . ."
ASSIGNEE_SEPARATOR = ",\n"

_E = TypeVar("_E")


class ProjectionPolicy(str, Enum):
    """How identities are rendered into summaries."""

    DISPLAY = "display"
    PASSTHROUGH = "passthrough"


class ScanFilter(str, Enum):
    OPEN = "open"
    ALL = "all"

    @property
    def predicate(self) -> IssuePredicate:
        if self is ScanFilter.OPEN:
            return open_issues
        return all_issues


class IssueSummary(BaseModel):
    repo: str
    number: int
    title: str
    state: str


class DisplayIssueSummary(IssueSummary):
    """Summary with author and assignees resolved to logins."""

    author_login: str
    assignees: str = Field(default="")


class RawIssueSummary(IssueSummary):
    """Summary carrying author and assignee IDs unresolved."""

    author_id: str
    assignee_ids: list[str] = Field(default_factory=list)


def truncate_title(title: str) -> str:
    if len(title) > TITLE_MAX_LENGTH:
        return title[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return title


def display_name(context: RequestContext, cache: ResolutionCache, user_id: str) -> str:
    """Resolve a user ID to a login, falling back to ``unknown``.

    Lookup errors and unknown users never fail the request, but a cancelled
    or expired context does: :class:`RequestCancelled` propagates.
    """
    context.check()
    result = cache.lookup_user(user_id)
    if isinstance(result, Found):
        return result.value.login
    if isinstance(result, Failed):
        logger.warning(
            "Unable to resolve user; showing placeholder",
            extra={"user_id": user_id, "error": str(result.error)},
        )
    else:
        logger.debug("Unknown user; showing placeholder", extra={"user_id": user_id})
    return UNKNOWN_USER


class IssueSummaryResolver:
    """Builds issue summaries for one organization's configured repository."""

    def __init__(
        self,
        *,
        cache: ResolutionCache,
        store: EntityStore,
        repo_name: str,
        projection: ProjectionPolicy = ProjectionPolicy.DISPLAY,
        scan_filter: ScanFilter = ScanFilter.OPEN,
    ) -> None:
        self._cache = cache
        self._store = store
        self._repo_name = repo_name
        self._projection = ProjectionPolicy(projection)
        self._scan_filter = ScanFilter(scan_filter)

    @property
    def repo_name(self) -> str:
        return self._repo_name

    @property
    def projection(self) -> ProjectionPolicy:
        return self._projection

    @property
    def scan_filter(self) -> ScanFilter:
        return self._scan_filter

    def resolve(self, context: RequestContext, org_login: str) -> list[IssueSummary]:
        context.check()
        org = _require(
            self._cache.lookup_organization_by_login(org_login),
            what="organization",
            name=org_login,
        )

        repo_name = self._repo_name
        context.check()
        repo = _require(
            self._cache.lookup_repository_by_name(org.org_id, repo_name),
            what="repository",
            name=repo_name,
        )

        summaries: list[IssueSummary] = []

        def visit(issue: Issue) -> None:
            context.check()
            summaries.append(self._project(context, repo_name, issue))

        try:
            self._store.scan_issues(org.org_id, repo.repo_id, self._scan_filter.predicate, visit)
        except IssuesDashboardError:
            raise
        except Exception as e:
            raise ScanFailure(
                f"unable to read issues of repository {repo_name} in organization {org_login}: {e}"
            ) from e

        logger.debug(
            "Resolved issue summaries",
            extra={
                "org": org_login,
                "repo": repo_name,
                "count": len(summaries),
                "projection": self._projection.value,
                "scan_filter": self._scan_filter.value,
            },
        )
        return summaries

    def _project(self, context: RequestContext, repo_name: str, issue: Issue) -> IssueSummary:
        if self._projection is ProjectionPolicy.PASSTHROUGH:
            return RawIssueSummary(
                repo=repo_name,
                number=issue.number,
                title=issue.title,
                state=issue.state,
                author_id=issue.author_id,
                assignee_ids=list(issue.assignee_ids),
            )

        author = display_name(context, self._cache, issue.author_id)
        assignees = [
            display_name(context, self._cache, user_id) for user_id in issue.assignee_ids
        ]
        return DisplayIssueSummary(
            repo=repo_name,
            number=issue.number,
            title=truncate_title(issue.title),
            state=issue.state,
            author_login=author,
            assignees=ASSIGNEE_SEPARATOR.join(assignees),
        )


def _require(result: Lookup[_E], *, what: str, name: str) -> _E:
    if isinstance(result, Found):
        return result.value
    if isinstance(result, Failed):
        raise LookupFailure(f"unable to get information on {what} {name}: {result.error}")
    raise NotFound(f"no information available on {what} {name}")
