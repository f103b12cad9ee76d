"""GitHub API client wrapper used by the syncer.

This wraps PyGithub so sync code works with small frozen dataclasses and tests
can replace the client with a mock.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from github import Auth, Github

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemoteOrganization:
    org_id: str
    login: str


@dataclass(frozen=True, slots=True)
class RemoteRepository:
    repo_id: str
    name: str
    full_name: str


@dataclass(frozen=True, slots=True)
class RemoteUser:
    user_id: str
    login: str


@dataclass(frozen=True, slots=True)
class RemoteIssue:
    """Minimal issue metadata fetched from GitHub."""

    number: int
    title: str
    state: str
    body: str
    author: RemoteUser | None
    assignees: list[RemoteUser] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
    closed_at: str | None = None


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def _remote_user(user: Any) -> RemoteUser | None:
    if user is None:
        return None
    return RemoteUser(user_id=str(user.id), login=user.login)


class GitHubClient:
    """Small wrapper around PyGithub for the read operations sync needs."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        github_api: Github | None = None,
    ) -> None:
        if github_api is not None:
            self._github = github_api
            logger.debug("Using injected Github instance")
            return

        if not token:
            raise ValueError("GitHub token is required")

        self._github = Github(auth=Auth.Token(token), base_url=base_url)
        logger.info("Authenticated with GitHub", extra={"base_url": base_url})

    def get_organization(self, login: str) -> RemoteOrganization:
        org = self._github.get_organization(login)
        return RemoteOrganization(org_id=str(org.id), login=org.login)

    def get_repository(self, org_login: str, name: str) -> RemoteRepository:
        repo = self._github.get_repo(f"{org_login}/{name}")
        return RemoteRepository(repo_id=str(repo.id), name=repo.name, full_name=repo.full_name)

    def iter_issues(
        self, org_login: str, name: str, *, state: str = "all"
    ) -> Iterator[RemoteIssue]:
        """Yield issues in API order. Pull requests are skipped."""
        repo = self._github.get_repo(f"{org_login}/{name}")
        logger.debug("Listing issues", extra={"repo": repo.full_name, "state": state})
        for issue in repo.get_issues(state=state):
            if issue.pull_request is not None:
                continue
            assignees = [_remote_user(a) for a in issue.assignees or []]
            yield RemoteIssue(
                number=issue.number,
                title=issue.title or "",
                state=issue.state,
                body=issue.body or "",
                author=_remote_user(issue.user),
                assignees=[a for a in assignees if a is not None],
                created_at=_iso(issue.created_at),
                updated_at=_iso(issue.updated_at),
                closed_at=_iso(issue.closed_at),
            )

    def close(self) -> None:
        self._github.close()
        logger.debug("GitHub client closed")
