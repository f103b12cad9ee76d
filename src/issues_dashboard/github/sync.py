"""Copy one repository's issues from GitHub into the entity store.

The dashboard never talks to GitHub on the request path. This job fills the
store it reads from: the organization, the repository, every issue (all
states, so either scan filter has data) and every author/assignee referenced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from issues_dashboard.github.client import GitHubClient, RemoteUser
from issues_dashboard.storage.models import Issue, Organization, Repository, User
from issues_dashboard.storage.store import JsonEntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncReport:
    org_login: str
    repo_name: str
    issue_count: int
    user_count: int


class IssueSyncer:
    def __init__(self, *, github: GitHubClient, store: JsonEntityStore) -> None:
        self._github = github
        self._store = store

    def sync(self, org_login: str, repo_name: str) -> SyncReport:
        remote_org = self._github.get_organization(org_login)
        remote_repo = self._github.get_repository(remote_org.login, repo_name)

        org = Organization(org_id=remote_org.org_id, login=remote_org.login)
        repo = Repository(repo_id=remote_repo.repo_id, org_id=org.org_id, name=remote_repo.name)

        users: dict[str, User] = {}

        def remember(user: RemoteUser | None) -> str:
            if user is None:
                return ""
            users.setdefault(user.user_id, User(user_id=user.user_id, login=user.login))
            return user.user_id

        issues: list[Issue] = []
        for remote in self._github.iter_issues(remote_org.login, remote_repo.name):
            issues.append(
                Issue(
                    org_id=org.org_id,
                    repo_id=repo.repo_id,
                    number=remote.number,
                    title=remote.title,
                    state=remote.state,
                    author_id=remember(remote.author),
                    assignee_ids=[remember(a) for a in remote.assignees],
                    body=remote.body,
                    created_at=remote.created_at,
                    updated_at=remote.updated_at,
                    closed_at=remote.closed_at,
                )
            )

        # Write entities before issues so readers never see dangling IDs.
        self._store.upsert_organization(org)
        self._store.upsert_repository(repo)
        self._store.upsert_users(users.values())
        count = self._store.replace_issues(org.org_id, repo.repo_id, issues)

        logger.info(
            "Synced repository",
            extra={
                "org": org.login,
                "repo": repo.name,
                "issues": count,
                "users": len(users),
            },
        )
        return SyncReport(
            org_login=org.login,
            repo_name=repo.name,
            issue_count=count,
            user_count=len(users),
        )
