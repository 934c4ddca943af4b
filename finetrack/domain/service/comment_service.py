"""Comment domain service."""

from uuid import uuid4

import logfire

from finetrack.config import CommentSettings
from finetrack.domain.error import (
    ContentDeletedError,
    ForbiddenError,
    InvalidThreadError,
    NotFoundError,
    UnauthenticatedError,
)
from finetrack.domain.model.comment import Comment, CommentWithReplies
from finetrack.domain.model.common import utcnow
from finetrack.domain.model.user import User
from finetrack.domain.repository import (
    CommentRepository,
    FineRepository,
    UserRepository,
)
from finetrack.domain.value import (
    CommentFilters,
    CommentId,
    CommentSort,
    CreateCommentInput,
    FineId,
    UpdateCommentInput,
    normalize_content,
)

from .auth_service import AuthSession
from .base import Service
from .threading import assemble_threads


class CommentService(Service):
    """Domain service for reading and writing a fine's comments.

    Enforces two-level threading, author-only edits and soft deletes, and
    recomputes the owning fine's ``comment_count`` after every write that
    can change it.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        fine_repository: FineRepository,
        user_repository: UserRepository,
        auth: AuthSession,
        settings: CommentSettings | None = None,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            fine_repository: Fine repository (parent lookups and comment counts)
            user_repository: User repository (author profile snapshots)
            auth: Session of the user acting through this service
            settings: Comment settings
        """
        self.comment_repository = comment_repository
        self.fine_repository = fine_repository
        self.user_repository = user_repository
        self.auth = auth
        self.settings = settings or CommentSettings()

    async def list_comments(
        self,
        fine_id: FineId,
        filters: CommentFilters | None = None,
        sort: CommentSort = CommentSort.NEWEST,
        limit: int | None = None,
    ) -> list[Comment]:
        """List a fine's non-deleted comments.

        Args:
            fine_id: Fine ID
            filters: Optional filters
            sort: Sort order
            limit: Maximum number of comments (defaults to settings)

        Returns:
            Comments in the requested order
        """
        with logfire.span(
            "comment_service.list_comments",
            fine_id=str(fine_id),
            sort=sort.value,
            filtered=filters is not None,
        ):
            comments = await self.comment_repository.find_by_fine(
                fine_id=fine_id,
                filters=filters,
                sort=sort,
                limit=limit or self.settings.default_limit,
            )
            logfire.info(
                "Comments retrieved for fine",
                fine_id=str(fine_id),
                count=len(comments),
            )
            return comments

    async def list_threads(
        self,
        fine_id: FineId,
        sort: CommentSort = CommentSort.THREAD,
        limit: int | None = None,
    ) -> list[CommentWithReplies]:
        """List a fine's threads, each root with all of its replies.

        ``limit`` bounds the number of threads, chosen in ``sort`` order, so a
        thread is never cut off from its replies.
        """
        with logfire.span(
            "comment_service.list_threads", fine_id=str(fine_id), sort=sort.value
        ):
            roots = await self.comment_repository.find_thread_roots(
                fine_id=fine_id,
                sort=sort,
                limit=limit or self.settings.default_limit,
            )
            replies = await self.comment_repository.find_replies(
                [root.id for root in roots]
            )
            logfire.info(
                "Threads retrieved for fine",
                fine_id=str(fine_id),
                threads=len(roots),
                replies=len(replies),
            )
            return assemble_threads([*roots, *replies], sort)

    async def get_comment(self, comment_id: CommentId) -> Comment:
        """Get a single comment.

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span("comment_service.get_comment", comment_id=str(comment_id)):
            comment = await self.comment_repository.find_by_id(comment_id)
            if comment is None:
                logfire.warn("Comment not found", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))
            return comment

    async def create_comment(self, data: CreateCommentInput) -> Comment:
        """Create a root comment, or a reply to a root comment.

        Args:
            data: Fine ID, optional parent ID and content

        Returns:
            The persisted comment

        Raises:
            UnauthenticatedError: If nobody is signed in
            ValidationError: If content is empty or too long
            NotFoundError: If the fine, the parent or the author profile is missing
            InvalidThreadError: If the parent is itself a reply or on another fine
        """
        user = self._require_user("create comments")
        content = normalize_content(data.content, self.settings.max_length)

        with logfire.span(
            "comment_service.create_comment",
            fine_id=str(data.fine_id),
            author_id=str(user.id),
            parent_id=str(data.parent_id) if data.parent_id else None,
        ):
            fine = await self.fine_repository.find_by_id(data.fine_id)
            if fine is None:
                logfire.warn("Fine not found", fine_id=str(data.fine_id))
                raise NotFoundError("Fine", str(data.fine_id))

            if data.parent_id:
                parent = await self.comment_repository.find_by_id(data.parent_id)
                if parent is None:
                    logfire.warn(
                        "Parent comment not found",
                        parent_id=str(data.parent_id),
                        fine_id=str(data.fine_id),
                    )
                    raise NotFoundError("Parent comment", str(data.parent_id))
                if parent.fine_id != data.fine_id:
                    logfire.warn(
                        "Parent comment belongs to another fine",
                        parent_id=str(parent.id),
                        parent_fine_id=str(parent.fine_id),
                        target_fine_id=str(data.fine_id),
                    )
                    raise InvalidThreadError(
                        "Parent comment does not belong to this fine"
                    )
                if parent.parent_id is not None:
                    logfire.warn(
                        "Rejected reply to a reply",
                        parent_id=str(parent.id),
                        root_id=str(parent.parent_id),
                    )
                    raise InvalidThreadError(
                        "Cannot reply to a reply. Please reply to the original comment."
                    )

            profile = await self.user_repository.find_by_id(user.id)
            if profile is None:
                logfire.error("Author profile not found", user_id=str(user.id))
                raise NotFoundError("User profile", str(user.id))

            now = utcnow()
            comment = Comment(
                id=CommentId(uuid4()),
                fine_id=data.fine_id,
                author_id=profile.id,
                author_name=profile.display_name,
                author_username=profile.username,
                parent_id=data.parent_id,
                content=content,
                created_at=now,
                updated_at=now,
            )

            saved = await self.comment_repository.save(comment)
            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                fine_id=str(saved.fine_id),
                is_reply=saved.parent_id is not None,
            )

            await self._sync_comment_count(saved.fine_id)
            return saved

    async def update_comment(
        self, comment_id: CommentId, data: UpdateCommentInput
    ) -> Comment:
        """Edit the content of one's own comment.

        Raises:
            UnauthenticatedError: If nobody is signed in
            ValidationError: If content is empty or too long
            NotFoundError: If the comment does not exist
            ForbiddenError: If the caller is not the author
            ContentDeletedError: If the comment has been deleted
        """
        user = self._require_user("update comments")
        content = normalize_content(data.content, self.settings.max_length)

        with logfire.span(
            "comment_service.update_comment",
            comment_id=str(comment_id),
            content_length=len(content),
        ):
            comment = await self.get_comment(comment_id)
            self._require_author(comment, user)
            if comment.is_deleted:
                raise ContentDeletedError("comment", str(comment_id))

            updated = comment.model_copy(
                update={
                    "content": content,
                    "is_edited": True,
                    "updated_at": utcnow(),
                }
            )
            saved = await self.comment_repository.save(updated)
            logfire.info(
                "Comment updated",
                comment_id=str(saved.id),
                fine_id=str(saved.fine_id),
            )
            return saved

    async def delete_comment(self, comment_id: CommentId) -> Comment:
        """Soft delete one's own comment.

        The row is kept with ``is_deleted`` set and its content replaced by
        the deletion marker. Deleting twice is harmless: the fine's count is
        always recomputed from the remaining comments.

        Raises:
            UnauthenticatedError: If nobody is signed in
            NotFoundError: If the comment does not exist
            ForbiddenError: If the caller is not the author
        """
        user = self._require_user("delete comments")

        with logfire.span("comment_service.delete_comment", comment_id=str(comment_id)):
            comment = await self.get_comment(comment_id)
            self._require_author(comment, user)

            if comment.is_deleted:
                logfire.info("Comment already deleted", comment_id=str(comment_id))
                saved = comment
            else:
                deleted = comment.model_copy(
                    update={
                        "is_deleted": True,
                        "content": self.settings.deleted_marker,
                        "updated_at": utcnow(),
                    }
                )
                saved = await self.comment_repository.save(deleted)
                logfire.info(
                    "Comment soft deleted",
                    comment_id=str(saved.id),
                    fine_id=str(saved.fine_id),
                )

            await self._sync_comment_count(saved.fine_id)
            return saved

    async def count_comments(self, fine_id: FineId) -> int:
        """Count a fine's non-deleted comments."""
        with logfire.span("comment_service.count_comments", fine_id=str(fine_id)):
            return await self.comment_repository.count_by_fine(fine_id)

    async def recent_comments(self, limit: int | None = None) -> list[Comment]:
        """Newest non-deleted comments across all fines."""
        limit = limit or self.settings.recent_limit
        with logfire.span("comment_service.recent_comments", limit=limit):
            return await self.comment_repository.find_recent(limit=limit)

    async def _sync_comment_count(self, fine_id: FineId) -> int:
        """Recount a fine's comments from scratch and store the result.

        Runs after the comment write as a second step. A failure in between
        leaves the count stale until the next successful write on the fine,
        which recounts everything again.
        """
        count = await self.comment_repository.count_by_fine(fine_id)
        await self.fine_repository.update_comment_count(fine_id, count)
        logfire.info("Fine comment count synced", fine_id=str(fine_id), count=count)
        return count

    def _require_user(self, action: str) -> User:
        user = self.auth.current_user()
        if user is None:
            logfire.warn("Unauthenticated comment write", action=action)
            raise UnauthenticatedError(action)
        return user

    def _require_author(self, comment: Comment, user: User) -> None:
        if comment.author_id != user.id:
            logfire.warn(
                "Comment change by non-author",
                comment_id=str(comment.id),
                author_id=str(comment.author_id),
                user_id=str(user.id),
            )
            raise ForbiddenError("comment", str(comment.id), str(user.id))
