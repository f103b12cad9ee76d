"""Persisted entities read by the dashboard topics."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Organization(BaseModel):
    org_id: str
    login: str


class Repository(BaseModel):
    repo_id: str
    org_id: str
    name: str


class User(BaseModel):
    user_id: str
    login: str
    name: str | None = None


class Issue(BaseModel):
    """Raw issue record as written by the syncer."""

    org_id: str
    repo_id: str
    number: int
    title: str
    state: str = Field(default="open")
    author_id: str = Field(default="")
    assignee_ids: list[str] = Field(default_factory=list)

    body: str = Field(default="")
    created_at: str | None = Field(default=None)
    updated_at: str | None = Field(default=None)
    closed_at: str | None = Field(default=None)

    @property
    def is_closed(self) -> bool:
        return self.state.strip().lower() == "closed"
