"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional

from sqlalchemy import func, or_, select

from finetrack.domain.model import Comment
from finetrack.domain.repository import CommentRepository
from finetrack.domain.value import CommentFilters, CommentId, CommentSort, FineId
from finetrack.persistence.mappers import comment_to_dict, row_to_comment
from finetrack.persistence.repository.base import PostgresRepository
from finetrack.persistence.tables import comments_table


class PostgresCommentRepository(PostgresRepository, CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self._execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_fine(
        self,
        fine_id: FineId,
        filters: Optional[CommentFilters] = None,
        sort: CommentSort = CommentSort.NEWEST,
        limit: int = 100,
    ) -> List[Comment]:
        """Find a fine's non-deleted comments."""
        c = comments_table.c
        stmt = select(comments_table).where(c.fine_id == fine_id, c.is_deleted.is_(False))

        if filters:
            if filters.author_id:
                stmt = stmt.where(c.author_id == filters.author_id)
            if filters.roots_only:
                stmt = stmt.where(c.parent_id.is_(None))
            if filters.parent_id:
                stmt = stmt.where(c.parent_id == filters.parent_id)
            if filters.date_from:
                stmt = stmt.where(c.created_at >= filters.date_from)
            if filters.date_to:
                stmt = stmt.where(c.created_at <= filters.date_to)
            if filters.search:
                needle = filters.search.lower()
                stmt = stmt.where(
                    or_(
                        func.lower(c.content).contains(needle, autoescape=True),
                        func.lower(c.author_name).contains(needle, autoescape=True),
                    )
                )

        if sort is CommentSort.OLDEST:
            stmt = stmt.order_by(c.created_at.asc())
        elif sort is CommentSort.THREAD:
            # Thread path: root id, root before its replies, replies oldest first
            stmt = stmt.order_by(
                func.coalesce(c.parent_id, c.id),
                c.parent_id.asc().nulls_first(),
                c.created_at.asc(),
            )
        else:
            stmt = stmt.order_by(c.created_at.desc())

        result = await self._execute(stmt.limit(limit))
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_thread_roots(
        self,
        fine_id: FineId,
        sort: CommentSort = CommentSort.THREAD,
        limit: int = 100,
    ) -> List[Comment]:
        """Find a fine's non-deleted roots in thread order."""
        c = comments_table.c
        stmt = select(comments_table).where(
            c.fine_id == fine_id,
            c.parent_id.is_(None),
            c.is_deleted.is_(False),
        )

        if sort is CommentSort.OLDEST:
            stmt = stmt.order_by(c.created_at.asc(), c.id)
        elif sort is CommentSort.NEWEST:
            stmt = stmt.order_by(c.created_at.desc(), c.id)
        else:
            replies = comments_table.alias("replies")
            latest_reply = (
                select(func.max(replies.c.created_at))
                .where(
                    replies.c.parent_id == c.id,
                    replies.c.is_deleted.is_(False),
                )
                .scalar_subquery()
            )
            activity = func.greatest(
                c.created_at, func.coalesce(latest_reply, c.created_at)
            )
            stmt = stmt.order_by(activity.desc(), c.id)

        result = await self._execute(stmt.limit(limit))
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_replies(self, root_ids: List[CommentId]) -> List[Comment]:
        """Find the non-deleted replies to the given roots, oldest first."""
        if not root_ids:
            return []
        c = comments_table.c
        stmt = (
            select(comments_table)
            .where(c.parent_id.in_(root_ids), c.is_deleted.is_(False))
            .order_by(c.created_at.asc())
        )
        result = await self._execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_recent(self, limit: int = 10) -> List[Comment]:
        """Find the newest non-deleted comments across all fines."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.is_deleted.is_(False))
            .order_by(comments_table.c.created_at.desc())
            .limit(limit)
        )
        result = await self._execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        existing = await self.find_by_id(comment.id)
        comment_dict = comment_to_dict(comment)

        if existing:
            # fine_id and parent_id never change after creation
            comment_dict.pop("fine_id")
            comment_dict.pop("parent_id")
            stmt = (
                comments_table.update()
                .where(comments_table.c.id == comment.id)
                .values(**comment_dict)
            )
        else:
            stmt = comments_table.insert().values(**comment_dict)

        await self._execute(stmt)
        await self._flush()
        return await self.find_by_id(comment.id) or comment

    async def count_by_fine(self, fine_id: FineId) -> int:
        """Count comments for a fine (excluding deleted)."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.fine_id == fine_id)
            .where(comments_table.c.is_deleted.is_(False))
        )
        result = await self._execute(stmt)
        return result.scalar() or 0
