"""Entity storage and the read-through resolution cache."""

from __future__ import annotations

from issues_dashboard.storage.cache import Failed, Found, Lookup, Missing, ResolutionCache
from issues_dashboard.storage.models import Issue, Organization, Repository, User
from issues_dashboard.storage.store import EntityStore, JsonEntityStore, StoreError

__all__ = [
    "EntityStore",
    "Failed",
    "Found",
    "Issue",
    "JsonEntityStore",
    "Lookup",
    "Missing",
    "Organization",
    "Repository",
    "ResolutionCache",
    "StoreError",
    "User",
]
