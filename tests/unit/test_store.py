"""Unit tests for the JSON-file entity store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from issues_dashboard.storage import JsonEntityStore, StoreError, User
from issues_dashboard.storage.store import IssuePredicate, all_issues, open_issues


def _numbers(
    store: JsonEntityStore, org_id: str, repo_id: str, predicate: IssuePredicate
) -> list[int]:
    seen: list[int] = []
    store.scan_issues(org_id, repo_id, predicate, lambda issue: seen.append(issue.number))
    return seen


def test_empty_state_dir_reads_as_empty(tmp_path: Path) -> None:
    store = JsonEntityStore(tmp_path / "nothing-here")

    assert store.read_organization_by_login("istio") is None
    assert store.read_user("u1") is None
    assert _numbers(store, "o1", "r1", all_issues) == []


def test_readers_find_seeded_entities(state_dir: Path) -> None:
    store = JsonEntityStore(state_dir)

    org = store.read_organization_by_login("ISTIO")
    assert org is not None and org.org_id == "o1"

    repo = store.read_repository_by_name("o2", "istio")
    assert repo is not None and repo.repo_id == "r2"

    user = store.read_user("u2")
    assert user is not None and user.login == "bob"


def test_scan_respects_repo_and_predicate(state_dir: Path) -> None:
    store = JsonEntityStore(state_dir)

    assert _numbers(store, "o1", "r1", all_issues) == [1, 2, 3]
    assert _numbers(store, "o1", "r1", open_issues) == [1, 3]
    assert _numbers(store, "o2", "r2", all_issues) == [7]


def test_visitor_error_aborts_scan(state_dir: Path) -> None:
    store = JsonEntityStore(state_dir)
    seen: list[int] = []

    def visit(issue) -> None:  # type: ignore[no-untyped-def]
        seen.append(issue.number)
        if issue.number == 2:
            raise RuntimeError("stop")

    with pytest.raises(RuntimeError, match="stop"):
        store.scan_issues("o1", "r1", all_issues, visit)

    assert seen == [1, 2]


def test_malformed_state_raises_store_error(tmp_path: Path) -> None:
    tmp_path.mkdir(exist_ok=True)
    (tmp_path / "organizations.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "users.json").write_text('{"u1": "alice"}', encoding="utf-8")

    store = JsonEntityStore(tmp_path)

    with pytest.raises(StoreError):
        store.read_organization_by_login("istio")
    with pytest.raises(StoreError, match="expected a JSON list"):
        store.read_user("u1")


def test_replace_issues_only_touches_one_repository(state_dir: Path, make_issue) -> None:
    store = JsonEntityStore(state_dir)

    count = store.replace_issues("o1", "r1", [make_issue(42)])

    assert count == 1
    assert _numbers(store, "o1", "r1", all_issues) == [42]
    assert _numbers(store, "o2", "r2", all_issues) == [7]


def test_upsert_users_merges_by_id(state_dir: Path) -> None:
    store = JsonEntityStore(state_dir)

    store.upsert_users([User(user_id="u2", login="bobby"), User(user_id="u3", login="carol")])

    raw = json.loads((state_dir / "users.json").read_text(encoding="utf-8"))
    assert {item["user_id"]: item["login"] for item in raw} == {
        "u1": "alice",
        "u2": "bobby",
        "u3": "carol",
    }
