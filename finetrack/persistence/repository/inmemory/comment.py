"""In-memory comment repository for testing."""

from typing import Optional

from finetrack.domain.model.comment import Comment
from finetrack.domain.repository.comment import CommentRepository
from finetrack.domain.value import CommentFilters, CommentId, CommentSort, FineId


def _thread_path(comment: Comment) -> tuple:
    """Root id, then root before replies, then replies oldest first."""
    root_id = comment.parent_id or comment.id
    return (str(root_id), 0 if comment.parent_id is None else 1, comment.created_at)


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def find_by_fine(
        self,
        fine_id: FineId,
        filters: Optional[CommentFilters] = None,
        sort: CommentSort = CommentSort.NEWEST,
        limit: int = 100,
    ) -> list[Comment]:
        """Find a fine's non-deleted comments."""
        filters = filters or CommentFilters()
        comments = [
            c
            for c in self._comments.values()
            if c.fine_id == fine_id and filters.matches(c)
        ]

        if sort is CommentSort.OLDEST:
            comments.sort(key=lambda c: c.created_at)
        elif sort is CommentSort.THREAD:
            comments.sort(key=_thread_path)
        else:
            comments.sort(key=lambda c: c.created_at, reverse=True)

        return comments[:limit]

    async def find_thread_roots(
        self,
        fine_id: FineId,
        sort: CommentSort = CommentSort.THREAD,
        limit: int = 100,
    ) -> list[Comment]:
        """Find a fine's non-deleted roots in thread order."""
        roots = await self.find_by_fine(
            fine_id,
            CommentFilters(roots_only=True),
            CommentSort.OLDEST,
            limit=len(self._comments),
        )

        if sort is CommentSort.OLDEST:
            return roots[:limit]
        if sort is CommentSort.NEWEST:
            return list(reversed(roots))[:limit]

        activity = {root.id: root.created_at for root in roots}
        for comment in self._comments.values():
            if comment.is_deleted or comment.parent_id not in activity:
                continue
            activity[comment.parent_id] = max(activity[comment.parent_id], comment.created_at)
        roots.sort(key=lambda r: activity[r.id], reverse=True)
        return roots[:limit]

    async def find_replies(self, root_ids: list[CommentId]) -> list[Comment]:
        """Find the non-deleted replies to the given roots, oldest first."""
        wanted = set(root_ids)
        replies = [
            c
            for c in self._comments.values()
            if c.parent_id in wanted and not c.is_deleted
        ]
        replies.sort(key=lambda c: c.created_at)
        return replies

    async def find_recent(self, limit: int = 10) -> list[Comment]:
        """Find the newest non-deleted comments across all fines."""
        comments = [c for c in self._comments.values() if not c.is_deleted]
        comments.sort(key=lambda c: c.created_at, reverse=True)
        return comments[:limit]

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment."""
        self._comments[comment.id] = comment
        return comment

    async def count_by_fine(self, fine_id: FineId) -> int:
        """Count comments for a fine (excluding deleted)."""
        return sum(
            1
            for c in self._comments.values()
            if c.fine_id == fine_id and not c.is_deleted
        )
