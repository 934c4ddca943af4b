"""Optimistic comment creation."""

from typing import Optional

import logfire

from finetrack.application.sync.cache import CommentKeys, QueryCache
from finetrack.application.sync.merge import insert_into_threads
from finetrack.application.sync.mutations import invalidate_after_create
from finetrack.application.sync.timeout import with_timeout
from finetrack.config import SyncSettings
from finetrack.domain.error import UnauthenticatedError
from finetrack.domain.model.comment import Comment, PendingComment
from finetrack.domain.service import CommentService
from finetrack.domain.value import CreateCommentInput, normalize_content


class OptimisticCommentWriter:
    """Show a new comment in the fine's threaded views before the store confirms it.

    A ``PendingComment`` placeholder is added to every cached threaded view
    of the fine, then the comment is created. On success the fine's views
    are marked stale and the refetch (or the pushed insert) replaces the
    placeholder with the confirmed row. On failure the threaded views are
    restored exactly as they were and the error is re-raised.

    Root comments always get a placeholder. Replies get one only when
    ``SyncSettings.optimistic_replies`` is set; otherwise they rely on the
    settle-time refetch alone.
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

    async def submit(self, data: CreateCommentInput) -> Comment:
        """Create a comment with an immediate placeholder.

        Raises:
            UnauthenticatedError: If nobody is signed in (the cache is untouched)
            ValidationError: If the content is empty or too long (the cache is untouched)
            DomainError: Whatever the store raised, after the rollback
        """
        user = self.comment_service.auth.current_user()
        if user is None:
            raise UnauthenticatedError("post a comment")

        content = normalize_content(
            data.content, self.comment_service.settings.max_length
        )
        placeholder = PendingComment(
            id=PendingComment.new_temp_id(),
            fine_id=data.fine_id,
            author_id=user.id,
            author_name=user.display_name,
            author_username=user.username,
            parent_id=data.parent_id,
            content=content,
        )

        threads_prefix = CommentKeys.fine_threads(data.fine_id)
        snapshot = self.cache.snapshot(threads_prefix)
        if data.parent_id is None or self.settings.optimistic_replies:
            self._show_placeholder(placeholder)

        try:
            comment = await with_timeout(
                self.comment_service.create_comment(data),
                self.settings.request_timeout,
                operation="create_comment",
            )
        except BaseException as e:
            # Cancellation rolls back too
            self.cache.restore(snapshot)
            logfire.warn(
                "Optimistic comment rolled back",
                fine_id=str(data.fine_id),
                placeholder_id=placeholder.id,
                error=repr(e),
            )
            raise

        invalidate_after_create(self.cache, comment.fine_id)
        logfire.info(
            "Optimistic comment confirmed",
            comment_id=str(comment.id),
            placeholder_id=placeholder.id,
        )
        return comment

    def _show_placeholder(self, placeholder: PendingComment) -> None:
        for key in self.cache.keys(CommentKeys.fine_threads(placeholder.fine_id)):
            sort = key[-1]

            def add(threads, sort=sort):
                merged = insert_into_threads(threads, placeholder, sort)
                return threads if merged is None else merged

            self.cache.patch(key, add)
