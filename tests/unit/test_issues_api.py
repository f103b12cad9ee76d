from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from issues_dashboard.server.app import create_app


@pytest.fixture
def client(monkeypatch, state_dir: Path) -> TestClient:
    monkeypatch.setenv("ISSUES_DASHBOARD_STATE_PATH", str(state_dir))
    monkeypatch.setenv("ISSUES_DASHBOARD_DEFAULT_ORG", "acme")
    monkeypatch.setenv("ISSUES_DASHBOARD_API_DEFAULT_ORG", "istio")
    monkeypatch.setenv("ISSUES_DASHBOARD_REPO_NAME", "istio")
    return TestClient(create_app())


def test_json_lists_open_issues_with_resolved_names(client: TestClient) -> None:
    resp = client.get("/api/issues/")

    assert resp.status_code == 200
    assert resp.json() == [
        {
            "repo": "istio",
            "number": 1,
            "title": "Sidecar injection fails",
            "state": "open",
            "author_login": "alice",
            "assignees": "alice,\nbob",
        },
        {
            "repo": "istio",
            "number": 3,
            "title": "Flaky test",
            "state": "open",
            "author_login": "unknown",
            "assignees": "",
        },
    ]


def test_json_org_query_parameter_overrides_default(client: TestClient) -> None:
    resp = client.get("/api/issues/", params={"org": "acme"})

    assert resp.status_code == 200
    assert [item["number"] for item in resp.json()] == [7]


def test_html_and_json_use_their_own_default_org(client: TestClient) -> None:
    html = client.get("/issues/")
    api = client.get("/api/issues/")

    assert html.status_code == 200
    assert "Acme issue" in html.text
    assert "Sidecar injection fails" not in html.text
    assert [item["number"] for item in api.json()] == [1, 3]


def test_html_renders_summaries(client: TestClient) -> None:
    resp = client.get("/issues/", params={"org": "istio"})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "Sidecar injection fails" in resp.text
    assert "Flaky test" in resp.text
    assert "Old bug" not in resp.text
    assert "alice,\nbob" in resp.text
    assert "unknown" in resp.text


def test_html_unknown_org_renders_error_page_only(client: TestClient) -> None:
    resp = client.get("/issues/", params={"org": "nope"})

    assert resp.status_code == 404
    assert "no information available on organization nope" in resp.text
    assert "<table>" not in resp.text


def test_json_unknown_org_is_404(client: TestClient) -> None:
    resp = client.get("/api/issues/", params={"org": "nope"})

    assert resp.status_code == 404
    assert resp.json() == {"error": "no information available on organization nope"}


def test_json_store_failure_is_500(client: TestClient, state_dir: Path) -> None:
    (state_dir / "organizations.json").write_text("not json", encoding="utf-8")

    resp = client.get("/api/issues/", params={"org": "someone-new"})

    assert resp.status_code == 500
    assert resp.json()["error"].startswith("unable to get information on organization someone-new")


def test_json_scan_failure_is_500(client: TestClient, state_dir: Path) -> None:
    # Prime the cache so only the issue scan hits the broken file.
    assert client.get("/api/issues/").status_code == 200
    (state_dir / "issues.json").write_text("[{\"number\": \"not a number\"}]", encoding="utf-8")

    resp = client.get("/api/issues/")

    assert resp.status_code == 500
    assert resp.json()["error"].startswith("unable to read issues of repository istio")


def test_passthrough_and_all_issues_from_settings(monkeypatch, state_dir: Path) -> None:
    monkeypatch.setenv("ISSUES_DASHBOARD_STATE_PATH", str(state_dir))
    monkeypatch.setenv("ISSUES_DASHBOARD_PROJECTION", "passthrough")
    monkeypatch.setenv("ISSUES_DASHBOARD_SCAN_FILTER", "all")
    client = TestClient(create_app())

    resp = client.get("/api/issues/", params={"org": "istio"})

    assert resp.status_code == 200
    body = resp.json()
    assert [item["number"] for item in body] == [1, 2, 3]
    assert body[0]["author_id"] == "u1"
    assert body[0]["assignee_ids"] == ["u1", "u2"]
    assert body[2]["author_id"] == "ghost"
    assert "author_login" not in body[0]

    html = client.get("/issues/", params={"org": "istio"})
    assert html.status_code == 200
    assert "ghost" in html.text


def test_health_and_index(client: TestClient) -> None:
    health = client.get("/api/health").json()
    assert health["status"] == "ok"
    assert health["topics"] == ["issues"]
    assert "version" in health

    index = client.get("/")
    assert index.status_code == 200
    assert "Information on new and old issues." in index.text
