"""Live update bridge between the push channel and the query cache.

One ``LiveCommentUpdates`` follows one fine at a time::

    UNSUBSCRIBED --start(fine_id)--> SUBSCRIBED --stop()--> UNSUBSCRIBED

While subscribed, every change the channel delivers for the fine is folded
into every cached view that can hold the row: the fine's flat lists, its
threaded views, the comment's detail entry, the fine's count and the recent
feed. Events carry the complete row, so rows are replaced whole by id and
never merged field by field.
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from enum import Enum
from typing import AsyncIterator, Callable, Optional

import logfire

from finetrack.adapter.realtime import (
    CommentChange,
    CommentChangeKind,
    PushChannel,
    Subscription,
)
from finetrack.application.sync.cache import FINES_KEY, CommentKeys, QueryCache
from finetrack.application.sync.merge import (
    find_in_threads,
    insert_comment,
    insert_into_threads,
    replace_comment,
    replace_in_threads,
)
from finetrack.config import SyncSettings
from finetrack.domain.model.comment import Comment
from finetrack.domain.value import CommentId, FineId

CommentCallback = Callable[[Comment], None]


class SubscriptionState(str, Enum):
    UNSUBSCRIBED = "unsubscribed"
    SUBSCRIBED = "subscribed"


class LiveCommentUpdates:
    """Apply pushed comment changes for one fine to the query cache."""

    def __init__(
        self,
        cache: QueryCache,
        channel: PushChannel,
        settings: Optional[SyncSettings] = None,
        on_added: Optional[CommentCallback] = None,
        on_updated: Optional[CommentCallback] = None,
        on_deleted: Optional[CommentCallback] = None,
    ) -> None:
        self.cache = cache
        self.channel = channel
        self.settings = settings or SyncSettings()
        self.on_added = on_added
        self.on_updated = on_updated
        self.on_deleted = on_deleted

        self.state = SubscriptionState.UNSUBSCRIBED
        self.fine_id: Optional[FineId] = None
        self._subscription: Optional[Subscription] = None
        self._deleted_ids: set[CommentId] = set()

    @property
    def is_subscribed(self) -> bool:
        return self.state is SubscriptionState.SUBSCRIBED

    async def start(self, fine_id: FineId) -> None:
        """Subscribe to a fine's changes, leaving any previous fine first."""
        if self.is_subscribed and self.fine_id == fine_id:
            return
        self.stop()

        subscription = await self.channel.subscribe(fine_id, self._on_change)
        self._subscription = subscription
        self.fine_id = fine_id
        self.state = SubscriptionState.SUBSCRIBED
        logfire.info("Live comment updates started", fine_id=str(fine_id))

    def stop(self) -> None:
        """Unsubscribe; events still in flight are dropped."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

        if self.is_subscribed:
            logfire.info("Live comment updates stopped", fine_id=str(self.fine_id))

        self.state = SubscriptionState.UNSUBSCRIBED
        self.fine_id = None
        self._deleted_ids.clear()

    @asynccontextmanager
    async def following(self, fine_id: FineId) -> AsyncIterator["LiveCommentUpdates"]:
        """Stay subscribed to ``fine_id`` for the duration of the block."""
        await self.start(fine_id)
        try:
            yield self
        finally:
            self.stop()

    def refresh(self, fine_id: Optional[FineId] = None) -> None:
        """Mark the fine's lists, threaded views and count stale."""
        fine_id = fine_id or self.fine_id
        if fine_id is None:
            return
        self.cache.invalidate(CommentKeys.fine_lists(fine_id))
        self.cache.invalidate(CommentKeys.fine_threads(fine_id))
        self.cache.invalidate(CommentKeys.count(fine_id))

    def apply_insert(self, comment: Comment) -> None:
        """Fold a locally known new comment into the cache right away."""
        self.handle_insert(comment)

    def apply_update(self, comment: Comment) -> None:
        """Fold a locally known edit into the cache right away."""
        self.handle_update(comment)

    def handle_insert(self, comment: Comment) -> None:
        fine_id = comment.fine_id
        already_cached = self._is_cached(comment)
        window = timedelta(seconds=self.settings.placeholder_match_window)

        for key in self.cache.keys(CommentKeys.fine_lists(fine_id)):
            filters, sort = key[-2], key[-1]
            if filters.matches(comment):
                self.cache.patch(key, lambda rows, s=sort: insert_comment(rows, comment, s))
            else:
                self.cache.patch(key, lambda rows: replace_comment(rows, comment))

        for key in self.cache.keys(CommentKeys.fine_threads(fine_id)):
            threads = self.cache.get_data(key)
            if threads is None:
                continue
            merged = insert_into_threads(threads, comment, key[-1], window)
            if merged is None:
                # Reply to a root this view has not loaded; let it refetch
                self.cache.invalidate(key)
            else:
                self.cache.patch(key, lambda _, m=merged: m)

        self.cache.patch(CommentKeys.detail(comment.id), lambda _: comment)

        if not already_cached:
            self.cache.patch(CommentKeys.count(fine_id), lambda count: count + 1)

        self.cache.invalidate(CommentKeys.recent())
        self.cache.invalidate(FINES_KEY)

        logfire.debug(
            "Applied comment insert",
            comment_id=str(comment.id),
            fine_id=str(fine_id),
            already_cached=already_cached,
        )
        if self.on_added:
            self.on_added(comment)

    def handle_update(self, comment: Comment) -> None:
        self._replace_everywhere(comment)
        self.cache.patch_matching(
            CommentKeys.recent(), lambda rows: replace_comment(rows, comment)
        )

        logfire.debug(
            "Applied comment update",
            comment_id=str(comment.id),
            fine_id=str(comment.fine_id),
        )
        if self.on_updated:
            self.on_updated(comment)

    def handle_delete(self, comment: Comment) -> None:
        first_deletion = (
            comment.id not in self._deleted_ids and not self._is_cached_as_deleted(comment)
        )
        self._deleted_ids.add(comment.id)

        self._replace_everywhere(comment)

        if first_deletion:
            self.cache.patch(
                CommentKeys.count(comment.fine_id), lambda count: max(0, count - 1)
            )
            self.cache.invalidate(FINES_KEY)
        self.cache.invalidate(CommentKeys.recent())

        logfire.debug(
            "Applied comment delete",
            comment_id=str(comment.id),
            fine_id=str(comment.fine_id),
            first_deletion=first_deletion,
        )
        if self.on_deleted:
            self.on_deleted(comment)

    def _on_change(self, change: CommentChange) -> None:
        if not self.is_subscribed or change.fine_id != self.fine_id:
            logfire.debug(
                "Dropped comment change after unsubscribe",
                comment_id=str(change.comment.id),
                kind=change.kind.value,
            )
            return

        if change.kind is CommentChangeKind.INSERT:
            self.handle_insert(change.comment)
        elif change.kind is CommentChangeKind.UPDATE:
            self.handle_update(change.comment)
        else:
            self.handle_delete(change.comment)

    def _replace_everywhere(self, comment: Comment) -> None:
        fine_id = comment.fine_id
        self.cache.patch_matching(
            CommentKeys.fine_lists(fine_id), lambda rows: replace_comment(rows, comment)
        )
        self.cache.patch_matching(
            CommentKeys.fine_threads(fine_id),
            lambda threads: replace_in_threads(threads, comment),
        )
        self.cache.patch(CommentKeys.detail(comment.id), lambda _: comment)

    def _cached_copies(self, comment: Comment) -> list:
        copies = []
        for key in self.cache.keys(CommentKeys.fine_lists(comment.fine_id)):
            rows = self.cache.get_data(key) or []
            copies.extend(c for c in rows if c.id == comment.id)
        for key in self.cache.keys(CommentKeys.fine_threads(comment.fine_id)):
            found = find_in_threads(self.cache.get_data(key) or [], comment.id)
            if found is not None:
                copies.append(found)
        detail = self.cache.get_data(CommentKeys.detail(comment.id))
        if detail is not None:
            copies.append(detail)
        return copies

    def _is_cached(self, comment: Comment) -> bool:
        return bool(self._cached_copies(comment))

    def _is_cached_as_deleted(self, comment: Comment) -> bool:
        return any(c.is_deleted for c in self._cached_copies(comment))
