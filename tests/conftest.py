"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from issues_dashboard.storage import (
    Issue,
    JsonEntityStore,
    Organization,
    Repository,
    ResolutionCache,
    StoreError,
    User,
)


class FakeStore:
    """In-memory entity store with switchable failures."""

    def __init__(self) -> None:
        self.orgs: dict[str, Organization] = {}
        self.repos: dict[tuple[str, str], Repository] = {}
        self.users: dict[str, User] = {}
        self.issues: list[Issue] = []

        self.org_error: Exception | None = None
        self.repo_error: Exception | None = None
        self.user_errors: dict[str, Exception] = {}
        self.fail_scan_after: int | None = None

        self.user_reads: list[str] = []
        self.org_reads = 0

    def read_organization_by_login(self, login: str) -> Organization | None:
        self.org_reads += 1
        if self.org_error is not None:
            raise self.org_error
        return self.orgs.get(login)

    def read_repository_by_name(self, org_id: str, name: str) -> Repository | None:
        if self.repo_error is not None:
            raise self.repo_error
        return self.repos.get((org_id, name))

    def read_user(self, user_id: str) -> User | None:
        self.user_reads.append(user_id)
        if user_id in self.user_errors:
            raise self.user_errors[user_id]
        return self.users.get(user_id)

    def scan_issues(self, org_id, repo_id, predicate, visit) -> None:  # type: ignore[no-untyped-def]
        visited = 0
        for issue in self.issues:
            if issue.org_id != org_id or issue.repo_id != repo_id or not predicate(issue):
                continue
            if self.fail_scan_after is not None and visited >= self.fail_scan_after:
                raise StoreError("issues.json went away")
            visit(issue)
            visited += 1


def _make_issue(number: int, **overrides: object) -> Issue:
    values: dict[str, object] = {
        "org_id": "o1",
        "repo_id": "r1",
        "number": number,
        "title": f"Issue {number}",
        "state": "open",
        "author_id": "u1",
        "assignee_ids": [],
    }
    values.update(overrides)
    return Issue.model_validate(values)


@pytest.fixture
def fake_store() -> FakeStore:
    """Provide a fake store seeded with the istio org, repo and two users."""
    store = FakeStore()
    store.orgs["istio"] = Organization(org_id="o1", login="istio")
    store.repos[("o1", "istio")] = Repository(repo_id="r1", org_id="o1", name="istio")
    store.users["u1"] = User(user_id="u1", login="alice")
    store.users["u2"] = User(user_id="u2", login="bob")
    return store


@pytest.fixture
def fake_cache(fake_store: FakeStore) -> ResolutionCache:
    return ResolutionCache(fake_store, ttl_seconds=300)


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Provide a JSON store directory seeded with two orgs' worth of data."""
    path = tmp_path / "dashboard_state"
    store = JsonEntityStore(path)
    store.upsert_organization(Organization(org_id="o1", login="istio"))
    store.upsert_organization(Organization(org_id="o2", login="acme"))
    store.upsert_repository(Repository(repo_id="r1", org_id="o1", name="istio"))
    store.upsert_repository(Repository(repo_id="r2", org_id="o2", name="istio"))
    store.upsert_users(
        [
            User(user_id="u1", login="alice"),
            User(user_id="u2", login="bob"),
        ]
    )
    store.replace_issues(
        "o1",
        "r1",
        [
            _make_issue(1, title="Sidecar injection fails", assignee_ids=["u1", "u2"]),
            _make_issue(2, title="Old bug", state="closed", author_id="u2"),
            _make_issue(3, title="Flaky test", author_id="ghost"),
        ],
    )
    store.replace_issues(
        "o2",
        "r2",
        [_make_issue(7, org_id="o2", repo_id="r2", title="Acme issue")],
    )
    return path


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    """Provide a factory for issues in the istio/istio repository."""
    return _make_issue
