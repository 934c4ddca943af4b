"""Unit tests for comment ordering in the in-memory repository."""

from uuid import uuid4

import pytest

from finetrack.domain.value import CommentSort, FineId
from finetrack.persistence.repository.inmemory import InMemoryCommentRepository
from tests.conftest import at, make_comment

FINE_ID = FineId(uuid4())


class TestThreadOrder:
    """THREAD sort keeps each root directly ahead of its replies."""

    @pytest.mark.asyncio
    async def test_roots_are_followed_by_their_replies(self):
        # Arrange
        repo = InMemoryCommentRepository()
        first = make_comment(FINE_ID, created_at=at(0))
        second = make_comment(FINE_ID, created_at=at(1))
        late_reply = make_comment(FINE_ID, parent_id=first.id, created_at=at(9))
        early_reply = make_comment(FINE_ID, parent_id=first.id, created_at=at(2))
        for comment in (late_reply, second, early_reply, first):
            await repo.save(comment)

        # Act
        result = await repo.find_by_fine(FINE_ID, sort=CommentSort.THREAD)

        # Assert
        position = {c.id: i for i, c in enumerate(result)}
        assert position[first.id] < position[early_reply.id] < position[late_reply.id]
        assert abs(position[second.id] - position[first.id]) in (1, 3)

    @pytest.mark.asyncio
    async def test_other_fines_and_deleted_rows_are_excluded(self):
        # Arrange
        repo = InMemoryCommentRepository()
        kept = await repo.save(make_comment(FINE_ID, created_at=at(0)))
        await repo.save(make_comment(FINE_ID, created_at=at(1), is_deleted=True))
        await repo.save(make_comment(FineId(uuid4()), created_at=at(2)))

        # Act
        result = await repo.find_by_fine(FINE_ID)

        # Assert
        assert result == [kept]
        assert await repo.count_by_fine(FINE_ID) == 1


class TestThreadRoots:
    """Root selection for threaded views."""

    @pytest.mark.asyncio
    async def test_roots_rank_by_latest_non_deleted_reply(self):
        # Arrange
        repo = InMemoryCommentRepository()
        first = await repo.save(make_comment(FINE_ID, created_at=at(0)))
        second = await repo.save(make_comment(FINE_ID, created_at=at(5)))
        await repo.save(make_comment(FINE_ID, parent_id=first.id, created_at=at(3)))
        await repo.save(
            make_comment(
                FINE_ID, parent_id=first.id, created_at=at(9), is_deleted=True
            )
        )

        # Act
        roots = await repo.find_thread_roots(FINE_ID)

        # Assert: the deleted reply does not count as activity
        assert [c.id for c in roots] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_replies_skip_deleted_and_unrequested_roots(self):
        # Arrange
        repo = InMemoryCommentRepository()
        first = await repo.save(make_comment(FINE_ID, created_at=at(0)))
        second = await repo.save(make_comment(FINE_ID, created_at=at(1)))
        late = await repo.save(
            make_comment(FINE_ID, parent_id=first.id, created_at=at(8))
        )
        early = await repo.save(
            make_comment(FINE_ID, parent_id=first.id, created_at=at(2))
        )
        await repo.save(
            make_comment(FINE_ID, parent_id=first.id, created_at=at(4), is_deleted=True)
        )
        await repo.save(make_comment(FINE_ID, parent_id=second.id, created_at=at(3)))

        # Act
        replies = await repo.find_replies([first.id])

        # Assert
        assert [c.id for c in replies] == [early.id, late.id]
