"""Client-side cache and the components that keep it in sync with the store."""

from finetrack.application.sync.cache import (
    FINES_KEY,
    CacheEntry,
    CacheSnapshot,
    CacheStatus,
    CommentKeys,
    QueryCache,
)
from finetrack.application.sync.live_updates import LiveCommentUpdates, SubscriptionState
from finetrack.application.sync.mutations import CommentMutations
from finetrack.application.sync.optimistic import OptimisticCommentWriter
from finetrack.application.sync.queries import CommentQueries

__all__ = [
    "FINES_KEY",
    "CacheEntry",
    "CacheSnapshot",
    "CacheStatus",
    "CommentKeys",
    "CommentMutations",
    "CommentQueries",
    "LiveCommentUpdates",
    "OptimisticCommentWriter",
    "QueryCache",
    "SubscriptionState",
]
