"""Unit tests for the comment read use cases."""

from uuid import uuid4

import pytest

from finetrack.application.usecase.comment import (
    GetCommentCountUseCase,
    GetCommentsRequest,
    GetCommentsUseCase,
    GetCommentUseCase,
    GetRecentCommentsRequest,
    GetRecentCommentsUseCase,
    GetThreadedCommentsRequest,
    GetThreadedCommentsUseCase,
)
from finetrack.domain.repository import CommentRepository
from finetrack.domain.value import CommentFilters, CommentSort
from tests.conftest import at, make_comment, make_fine, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def _seed(env):
    fine = make_fine()
    author = make_user()
    repo = await env.get(CommentRepository)
    root = await repo.save(make_comment(fine.id, author, "Root", created_at=at(0)))
    reply = await repo.save(
        make_comment(fine.id, author, "Reply", parent_id=root.id, created_at=at(1))
    )
    return fine, author, root, reply


class TestGetCommentsRequest:
    """Tests for query parameter conversion."""

    def test_no_filters_gives_none(self):
        request = GetCommentsRequest(fine_id=str(uuid4()))

        assert request.to_filters() is None

    def test_filters_are_converted(self):
        author_id = uuid4()
        request = GetCommentsRequest(
            fine_id=str(uuid4()), author_id=str(author_id), roots_only=True
        )

        assert request.to_filters() == CommentFilters(
            author_id=author_id, roots_only=True
        )

    def test_contradictory_filters_raise(self):
        request = GetCommentsRequest(
            fine_id=str(uuid4()), roots_only=True, parent_id=str(uuid4())
        )

        with pytest.raises(ValueError):
            request.to_filters()


class TestReadUseCases:
    """Tests for the read use cases."""

    @pytest.mark.asyncio
    async def test_get_comments(self, unit_env):
        # Arrange
        use_case = await unit_env.get(GetCommentsUseCase)
        fine, _, root, reply = await _seed(unit_env)

        # Act
        result = await use_case.execute(
            GetCommentsRequest(fine_id=str(fine.id), sort=CommentSort.OLDEST)
        )

        # Assert
        assert result.total == 2
        assert [c.comment_id for c in result.comments] == [str(root.id), str(reply.id)]

    @pytest.mark.asyncio
    async def test_get_threaded_comments(self, unit_env):
        # Arrange
        use_case = await unit_env.get(GetThreadedCommentsUseCase)
        fine, _, root, reply = await _seed(unit_env)

        # Act
        result = await use_case.execute(GetThreadedCommentsRequest(fine_id=str(fine.id)))

        # Assert
        assert result.total == 1
        thread = result.threads[0]
        assert thread.root.comment_id == str(root.id)
        assert [r.comment_id for r in thread.replies] == [str(reply.id)]
        assert thread.reply_count == 1

    @pytest.mark.asyncio
    async def test_count_single_and_recent(self, unit_env):
        # Arrange
        fine, _, root, reply = await _seed(unit_env)
        count_use_case = await unit_env.get(GetCommentCountUseCase)
        get_use_case = await unit_env.get(GetCommentUseCase)
        recent_use_case = await unit_env.get(GetRecentCommentsUseCase)

        # Act
        count = await count_use_case.execute(str(fine.id))
        single = await get_use_case.execute(str(reply.id))
        recent = await recent_use_case.execute(GetRecentCommentsRequest(limit=1))

        # Assert
        assert count.count == 2
        assert single.parent_id == str(root.id)
        assert [c.comment_id for c in recent.comments] == [str(reply.id)]
