"""Client-side query cache for comment views.

One ``QueryCache`` instance holds every cached comment query of a process
(flat lists, threaded views, counts, details and the recent feed). It is
constructed explicitly and handed to every component that reads or mutates
cached results; nothing reaches it through module state.

Keys are tuples and are matched by prefix, so ``("comments", "list", fine_id)``
addresses every flat list of one fine regardless of its filters and sort.
Cached data is never mutated in place: ``patch`` callbacks must return a new
value.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

import logfire

from finetrack.domain.model.common import utcnow
from finetrack.domain.value import CommentFilters, CommentId, CommentSort, FineId

CacheKey = tuple
CacheListener = Callable[[CacheKey, Optional["CacheEntry"]], None]

FINES_KEY: CacheKey = ("fines",)


class CacheStatus(str, Enum):
    """Lifecycle of a cached query."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class CacheEntry:
    """Result of one cached query plus its fetch state."""

    data: Any = None
    status: CacheStatus = CacheStatus.IDLE
    error: Optional[BaseException] = None
    is_stale: bool = False
    updated_at: Optional[datetime] = None

    @property
    def has_data(self) -> bool:
        return self.data is not None

    @property
    def is_loading(self) -> bool:
        return self.status is CacheStatus.LOADING


@dataclass(frozen=True)
class CacheSnapshot:
    """Copy of every entry under a key prefix, taken for rollback."""

    prefix: CacheKey
    entries: dict[CacheKey, CacheEntry] = field(default_factory=dict)


def key_matches(key: CacheKey, prefix: CacheKey) -> bool:
    """Check whether ``prefix`` addresses ``key`` (a key matches itself)."""
    return key[: len(prefix)] == prefix


class CommentKeys:
    """Builders for comment cache keys.

    Layout::

        ("comments",)
        ("comments", "list", fine_id, filters, sort)
        ("comments", "threaded", fine_id, sort)
        ("comments", "detail", comment_id)
        ("comments", "count", fine_id)
        ("comments", "recent", limit)
    """

    ALL: CacheKey = ("comments",)

    @classmethod
    def all(cls) -> CacheKey:
        return cls.ALL

    @classmethod
    def lists(cls) -> CacheKey:
        return (*cls.ALL, "list")

    @classmethod
    def fine_lists(cls, fine_id: FineId) -> CacheKey:
        return (*cls.lists(), fine_id)

    @classmethod
    def list(
        cls,
        fine_id: FineId,
        filters: Optional[CommentFilters] = None,
        sort: CommentSort = CommentSort.NEWEST,
    ) -> CacheKey:
        return (*cls.fine_lists(fine_id), filters or CommentFilters(), sort)

    @classmethod
    def threads(cls) -> CacheKey:
        return (*cls.ALL, "threaded")

    @classmethod
    def fine_threads(cls, fine_id: FineId) -> CacheKey:
        return (*cls.threads(), fine_id)

    @classmethod
    def threaded(
        cls, fine_id: FineId, sort: CommentSort = CommentSort.THREAD
    ) -> CacheKey:
        return (*cls.fine_threads(fine_id), sort)

    @classmethod
    def details(cls) -> CacheKey:
        return (*cls.ALL, "detail")

    @classmethod
    def detail(cls, comment_id: CommentId) -> CacheKey:
        return (*cls.details(), comment_id)

    @classmethod
    def count(cls, fine_id: FineId) -> CacheKey:
        return (*cls.ALL, "count", fine_id)

    @classmethod
    def recent(cls, limit: Optional[int] = None) -> CacheKey:
        """Recent feed key; without a limit, the prefix of every feed."""
        if limit is None:
            return (*cls.ALL, "recent")
        return (*cls.ALL, "recent", limit)


class QueryCache:
    """Key to result store shared by queries, mutations and live updates."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._listeners: list[CacheListener] = []

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self, prefix: CacheKey = ()) -> list[CacheKey]:
        """Return every cached key under ``prefix``."""
        return [k for k in self._entries if key_matches(k, prefix)]

    def read(self, key: CacheKey) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def get_data(self, key: CacheKey) -> Any:
        """Return the cached result for ``key``, or None when absent."""
        entry = self._entries.get(key)
        return entry.data if entry else None

    def write(self, key: CacheKey, data: Any) -> CacheEntry:
        """Replace the result for ``key`` with fresh, successful data."""
        entry = CacheEntry(
            data=data,
            status=CacheStatus.SUCCESS,
            is_stale=False,
            updated_at=utcnow(),
        )
        self._set(key, entry)
        return entry

    def patch(self, key: CacheKey, fn: Callable[[Any], Any]) -> bool:
        """Transform the cached result for ``key`` in place of a refetch.

        Does nothing when the key holds no data, so a patch never brings back
        a query nobody is viewing.

        Returns:
            True if the entry was patched
        """
        entry = self._entries.get(key)
        if entry is None or not entry.has_data:
            return False

        self._set(key, replace(entry, data=fn(entry.data), updated_at=utcnow()))
        return True

    def patch_matching(self, prefix: CacheKey, fn: Callable[[Any], Any]) -> int:
        """Patch every entry under ``prefix``; returns how many were patched."""
        return sum(1 for key in self.keys(prefix) if self.patch(key, fn))

    def invalidate(self, key_or_prefix: CacheKey) -> int:
        """Mark every entry under ``key_or_prefix`` stale.

        Stale entries keep their data; the next read through ``CommentQueries``
        refetches them.
        """
        keys = self.keys(key_or_prefix)
        for key in keys:
            self._set(key, replace(self._entries[key], is_stale=True))

        if keys:
            logfire.debug(
                "Cache invalidated", prefix=str(key_or_prefix), entries=len(keys)
            )
        return len(keys)

    def remove(self, key: CacheKey) -> None:
        if self._entries.pop(key, None) is not None:
            self._notify(key, None)

    def clear(self) -> None:
        for key in list(self._entries):
            self.remove(key)

    def set_loading(self, key: CacheKey) -> CacheEntry:
        """Flag ``key`` as fetching while keeping any previous data visible."""
        entry = replace(
            self._entries.get(key, CacheEntry()),
            status=CacheStatus.LOADING,
            error=None,
        )
        self._set(key, entry)
        return entry

    def set_error(self, key: CacheKey, error: BaseException) -> CacheEntry:
        """Record a failed fetch for ``key``; previous data stays in place."""
        entry = replace(
            self._entries.get(key, CacheEntry()),
            status=CacheStatus.ERROR,
            error=error,
        )
        self._set(key, entry)
        return entry

    def snapshot(self, prefix: CacheKey) -> CacheSnapshot:
        """Copy every entry under ``prefix``."""
        return CacheSnapshot(
            prefix=prefix,
            entries={k: self._entries[k] for k in self.keys(prefix)},
        )

    def restore(self, snapshot: CacheSnapshot) -> None:
        """Put every entry under the snapshot's prefix back as it was.

        Entries created under the prefix after the snapshot are removed.
        """
        for key in self.keys(snapshot.prefix):
            if key not in snapshot.entries:
                self.remove(key)

        for key, entry in snapshot.entries.items():
            if self._entries.get(key) is not entry:
                self._set(key, entry)

    def subscribe(self, listener: CacheListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, key: CacheKey, entry: CacheEntry) -> None:
        self._entries[key] = entry
        self._notify(key, entry)

    def _notify(self, key: CacheKey, entry: Optional[CacheEntry]) -> None:
        for listener in list(self._listeners):
            listener(key, entry)
