"""Read-through cache over the entity store.

Every lookup returns exactly one of three outcomes:

- :class:`Found` wraps the entity
- :class:`Missing` means the store answered and the entity does not exist
- :class:`Failed` means the store could not answer

Found and missing answers are cached for ``ttl_seconds``. Failures are never
cached, so the next lookup goes back to the store.

Entries are kept in insertion order, which is also expiry order since every
entry lives for the same TTL. Each insert drops expired entries from the
front and evicts the oldest ones once ``max_entries`` is reached, so lookups
of never-seen keys (for example arbitrary ``?org=`` values) cannot grow the
cache without bound.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from issues_dashboard.storage.models import Organization, Repository, User
from issues_dashboard.storage.store import EntityStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 10_000


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Missing:
    key: str


@dataclass(frozen=True, slots=True)
class Failed:
    error: Exception

    def __str__(self) -> str:
        return str(self.error)


Lookup = Union[Found[T], Missing, Failed]


@dataclass(frozen=True, slots=True)
class _Entry:
    value: object | None
    expires_at: float


class ResolutionCache:
    """Thread-safe TTL cache for organization, repository and user lookups."""

    def __init__(
        self,
        store: EntityStore,
        *,
        ttl_seconds: float = 300.0,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._store = store
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[Hashable, _Entry] = {}
        self._lock = threading.Lock()

    def lookup_organization_by_login(self, login: str) -> Lookup[Organization]:
        return self._read_through(
            ("org", login.strip().lower()),
            f"organization {login}",
            lambda: self._store.read_organization_by_login(login),
        )

    def lookup_repository_by_name(self, org_id: str, name: str) -> Lookup[Repository]:
        return self._read_through(
            ("repo", org_id, name.strip().lower()),
            f"repository {name}",
            lambda: self._store.read_repository_by_name(org_id, name),
        )

    def lookup_user(self, user_id: str) -> Lookup[User]:
        return self._read_through(
            ("user", user_id),
            f"user {user_id}",
            lambda: self._store.read_user(user_id),
        )

    def invalidate(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _read_through(
        self, key: Hashable, label: str, load: Callable[[], object | None]
    ) -> Lookup:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at > now:
                return _outcome(entry.value, label)

        logger.debug("Cache miss", extra={"key": label})
        try:
            value = load()
        except Exception as e:
            logger.debug("Store lookup failed", extra={"key": label, "error": str(e)})
            return Failed(e)

        if self._ttl > 0:
            now = self._clock()
            with self._lock:
                # Re-inserting moves the key to the back, keeping expiry order.
                self._entries.pop(key, None)
                self._evict_unlocked(now)
                self._entries[key] = _Entry(value=value, expires_at=now + self._ttl)
        return _outcome(value, label)

    def _evict_unlocked(self, now: float) -> None:
        while self._entries:
            oldest_key, oldest = next(iter(self._entries.items()))
            if oldest.expires_at > now and len(self._entries) < self._max_entries:
                return
            del self._entries[oldest_key]


def _outcome(value: object | None, label: str) -> Lookup:
    if value is None:
        return Missing(label)
    return Found(value)
