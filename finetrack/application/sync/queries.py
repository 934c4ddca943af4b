"""Read-through cached comment queries."""

from typing import Awaitable, Callable, Optional, TypeVar

import logfire

from finetrack.application.sync.cache import (
    CacheEntry,
    CacheKey,
    CacheStatus,
    CommentKeys,
    QueryCache,
)
from finetrack.application.sync.timeout import with_timeout
from finetrack.config import SyncSettings
from finetrack.domain.model.comment import Comment, CommentWithReplies
from finetrack.domain.service import CommentService
from finetrack.domain.value import CommentFilters, CommentId, CommentSort, FineId

T = TypeVar("T")


def is_fresh(entry: Optional[CacheEntry]) -> bool:
    """A fresh entry can be served without going back to the store."""
    return (
        entry is not None
        and entry.status is CacheStatus.SUCCESS
        and not entry.is_stale
    )


class CommentQueries:
    """Comment reads served from the cache, fetched from the store when missing or stale.

    While a fetch is running the entry's status is ``loading`` and any
    previous data stays readable; a failed fetch leaves status ``error`` with
    the exception attached and re-raises it.
    """

    def __init__(
        self,
        comment_service: CommentService,
        cache: QueryCache,
        settings: Optional[SyncSettings] = None,
    ) -> None:
        self.comment_service = comment_service
        self.cache = cache
        self.settings = settings or SyncSettings()

    async def comments(
        self,
        fine_id: FineId,
        filters: Optional[CommentFilters] = None,
        sort: CommentSort = CommentSort.NEWEST,
        limit: Optional[int] = None,
        refetch: bool = False,
    ) -> list[Comment]:
        """Flat comment list of a fine."""
        return await self._fetch(
            CommentKeys.list(fine_id, filters, sort),
            lambda: self.comment_service.list_comments(fine_id, filters, sort, limit),
            refetch,
        )

    async def threaded(
        self,
        fine_id: FineId,
        sort: CommentSort = CommentSort.THREAD,
        refetch: bool = False,
    ) -> list[CommentWithReplies]:
        """Threaded view of a fine."""
        return await self._fetch(
            CommentKeys.threaded(fine_id, sort),
            lambda: self.comment_service.list_threads(fine_id, sort),
            refetch,
        )

    async def detail(self, comment_id: CommentId, refetch: bool = False) -> Comment:
        return await self._fetch(
            CommentKeys.detail(comment_id),
            lambda: self.comment_service.get_comment(comment_id),
            refetch,
        )

    async def count(self, fine_id: FineId, refetch: bool = False) -> int:
        return await self._fetch(
            CommentKeys.count(fine_id),
            lambda: self.comment_service.count_comments(fine_id),
            refetch,
        )

    async def recent(
        self, limit: Optional[int] = None, refetch: bool = False
    ) -> list[Comment]:
        """Newest comments across every fine."""
        limit = limit or self.comment_service.settings.recent_limit
        return await self._fetch(
            CommentKeys.recent(limit),
            lambda: self.comment_service.recent_comments(limit),
            refetch,
        )

    def invalidate_comments(self, fine_id: Optional[FineId] = None) -> None:
        """Mark a fine's comment queries stale, or every comment query when no fine is given."""
        if fine_id is None:
            self.cache.invalidate(CommentKeys.all())
            return
        self.cache.invalidate(CommentKeys.fine_lists(fine_id))
        self.cache.invalidate(CommentKeys.fine_threads(fine_id))
        self.cache.invalidate(CommentKeys.count(fine_id))

    async def _fetch(
        self,
        key: CacheKey,
        load: Callable[[], Awaitable[T]],
        refetch: bool = False,
    ) -> T:
        entry = self.cache.read(key)
        if not refetch and is_fresh(entry):
            return entry.data

        self.cache.set_loading(key)
        try:
            data = await with_timeout(
                load(), self.settings.request_timeout, operation=str(key[:2])
            )
        except BaseException as e:
            # Cancelled or failed fetches must not leave the entry loading
            logfire.warn("Comment query failed", key=str(key), error=repr(e))
            self.cache.set_error(key, e)
            raise

        self.cache.write(key, data)
        return data
