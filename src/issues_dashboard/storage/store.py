"""Entity store contract and its JSON-file backed implementation.

The store keeps one JSON list per entity kind under a state directory:

- ``organizations.json``
- ``repositories.json``
- ``users.json``
- ``issues.json``

Missing files read as empty. Files that exist but cannot be parsed raise
:class:`StoreError` so callers can tell "nothing there" from "storage broken".
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from issues_dashboard.storage.models import Issue, Organization, Repository, User

logger = logging.getLogger(__name__)

IssuePredicate = Callable[[Issue], bool]
IssueVisitor = Callable[[Issue], None]

_M = TypeVar("_M", bound=BaseModel)


class StoreError(Exception):
    """Raised when persisted state cannot be read or written."""


class EntityStore(Protocol):
    def read_organization_by_login(self, login: str) -> Organization | None: ...

    def read_repository_by_name(self, org_id: str, name: str) -> Repository | None: ...

    def read_user(self, user_id: str) -> User | None: ...

    def scan_issues(
        self,
        org_id: str,
        repo_id: str,
        predicate: IssuePredicate,
        visit: IssueVisitor,
    ) -> None: ...


def all_issues(_issue: Issue) -> bool:
    return True


def open_issues(issue: Issue) -> bool:
    return not issue.is_closed


class JsonEntityStore:
    """JSON-file backed :class:`EntityStore`."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, name: str) -> Path:
        return self._root / f"{name}.json"

    def _load_unlocked(self, name: str, model: type[_M]) -> list[_M]:
        path = self._path(name)
        if not path.exists():
            return []
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"unable to read {path}: {e}") from e

        if raw is None:
            return []
        if not isinstance(raw, list):
            raise StoreError(f"unexpected shape in {path}: expected a JSON list")

        try:
            return [model.model_validate(item) for item in raw]
        except ValidationError as e:
            raise StoreError(f"invalid record in {path}: {e}") from e

    def _save_unlocked(self, name: str, items: Iterable[BaseModel]) -> None:
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.model_dump(mode="json") for item in items]
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    def _load(self, name: str, model: type[_M]) -> list[_M]:
        with self._lock:
            return self._load_unlocked(name, model)

    # Readers

    def read_organization_by_login(self, login: str) -> Organization | None:
        normalized = login.strip().lower()
        for org in self._load("organizations", Organization):
            if org.login.strip().lower() == normalized:
                return org
        return None

    def read_repository_by_name(self, org_id: str, name: str) -> Repository | None:
        normalized = name.strip().lower()
        for repo in self._load("repositories", Repository):
            if repo.org_id == org_id and repo.name.strip().lower() == normalized:
                return repo
        return None

    def read_user(self, user_id: str) -> User | None:
        for user in self._load("users", User):
            if user.user_id == user_id:
                return user
        return None

    def scan_issues(
        self,
        org_id: str,
        repo_id: str,
        predicate: IssuePredicate,
        visit: IssueVisitor,
    ) -> None:
        # Snapshot under the lock, visit outside it so visitors may call back
        # into the store.
        issues = self._load("issues", Issue)
        for issue in issues:
            if issue.org_id != org_id or issue.repo_id != repo_id:
                continue
            if not predicate(issue):
                continue
            visit(issue)

    # Writers (used by the syncer)

    def upsert_organization(self, org: Organization) -> None:
        with self._lock:
            orgs = [
                o
                for o in self._load_unlocked("organizations", Organization)
                if o.org_id != org.org_id
            ]
            orgs.append(org)
            self._save_unlocked("organizations", orgs)

    def upsert_repository(self, repo: Repository) -> None:
        with self._lock:
            repos = [
                r
                for r in self._load_unlocked("repositories", Repository)
                if r.repo_id != repo.repo_id
            ]
            repos.append(repo)
            self._save_unlocked("repositories", repos)

    def upsert_users(self, users: Iterable[User]) -> None:
        with self._lock:
            by_id = {u.user_id: u for u in self._load_unlocked("users", User)}
            for user in users:
                by_id[user.user_id] = user
            self._save_unlocked("users", by_id.values())

    def replace_issues(self, org_id: str, repo_id: str, issues: Iterable[Issue]) -> int:
        """Replace every stored issue of one repository, keeping the given order."""
        incoming = list(issues)
        with self._lock:
            kept = [
                i
                for i in self._load_unlocked("issues", Issue)
                if not (i.org_id == org_id and i.repo_id == repo_id)
            ]
            self._save_unlocked("issues", kept + incoming)
        logger.info(
            "Stored issues",
            extra={"org_id": org_id, "repo_id": repo_id, "count": len(incoming)},
        )
        return len(incoming)
