"""Comment writes with settle-time cache invalidation."""

from typing import Optional

import logfire

from finetrack.application.sync.cache import FINES_KEY, CommentKeys, QueryCache
from finetrack.application.sync.timeout import with_timeout
from finetrack.config import SyncSettings
from finetrack.domain.model.comment import Comment
from finetrack.domain.service import CommentService
from finetrack.domain.value import (
    CommentId,
    CreateCommentInput,
    FineId,
    UpdateCommentInput,
)


def invalidate_after_create(cache: QueryCache, fine_id: FineId) -> None:
    """Mark every view a new comment on ``fine_id`` can appear in stale."""
    cache.invalidate(CommentKeys.fine_lists(fine_id))
    cache.invalidate(CommentKeys.fine_threads(fine_id))
    cache.invalidate(CommentKeys.count(fine_id))
    cache.invalidate(CommentKeys.recent())
    cache.invalidate(FINES_KEY)
    logfire.debug("Settled comment create", fine_id=str(fine_id))


class CommentMutations:
    """Create, edit and delete comments, then bring the cache back in line.

    Nothing is written to the cache before the store answers; views that
    need immediate feedback for new comments use ``OptimisticCommentWriter``.
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

    async def create(self, data: CreateCommentInput) -> Comment:
        comment = await with_timeout(
            self.comment_service.create_comment(data),
            self.settings.request_timeout,
            operation="create_comment",
        )
        invalidate_after_create(self.cache, comment.fine_id)
        return comment

    async def update(self, comment_id: CommentId, data: UpdateCommentInput) -> Comment:
        comment = await with_timeout(
            self.comment_service.update_comment(comment_id, data),
            self.settings.request_timeout,
            operation="update_comment",
        )
        self.cache.write(CommentKeys.detail(comment.id), comment)
        self.cache.invalidate(CommentKeys.fine_lists(comment.fine_id))
        self.cache.invalidate(CommentKeys.fine_threads(comment.fine_id))
        logfire.debug("Settled comment update", comment_id=str(comment.id))
        return comment

    async def delete(self, comment_id: CommentId) -> Comment:
        """Soft delete a comment."""
        comment = await with_timeout(
            self.comment_service.delete_comment(comment_id),
            self.settings.request_timeout,
            operation="delete_comment",
        )
        self.cache.write(CommentKeys.detail(comment.id), comment)
        self.cache.invalidate(CommentKeys.fine_lists(comment.fine_id))
        self.cache.invalidate(CommentKeys.fine_threads(comment.fine_id))
        self.cache.invalidate(CommentKeys.count(comment.fine_id))
        self.cache.invalidate(CommentKeys.recent())
        self.cache.invalidate(FINES_KEY)
        logfire.debug("Settled comment delete", comment_id=str(comment.id))
        return comment
