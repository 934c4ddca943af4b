"""Unit tests for UpdateCommentUseCase and DeleteCommentUseCase."""

from uuid import uuid4

import pytest

from finetrack.application.usecase.comment.delete_comment import (
    DeleteCommentRequest,
    DeleteCommentUseCase,
)
from finetrack.application.usecase.comment.update_comment import (
    UpdateCommentRequest,
    UpdateCommentUseCase,
)
from finetrack.domain.error import (
    ContentDeletedError,
    ForbiddenError,
    NotFoundError,
)
from finetrack.domain.repository import CommentRepository, FineRepository, UserRepository
from finetrack.domain.service import CommentService, StaticAuthSession
from tests.conftest import make_comment, make_fine, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def _arrange(env):
    """Signed-in author with one comment on a fine."""
    author = make_user()
    await (await env.get(UserRepository)).save(author)
    (await env.get(StaticAuthSession)).sign_in(author)
    fine = await (await env.get(FineRepository)).save(make_fine(comment_count=1))
    comment = await (await env.get(CommentRepository)).save(
        make_comment(fine.id, author, "typo fix needed")
    )
    comment_service = await env.get(CommentService)
    return comment_service, fine, comment, author


class TestUpdateCommentUseCase:
    """Tests for UpdateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_update_comment_text_success(self, unit_env):
        """Updating comment text by author should succeed."""
        # Arrange
        comment_service, fine, comment, _ = await _arrange(unit_env)
        use_case = UpdateCommentUseCase(comment_service=comment_service)

        # Act
        result = await use_case.execute(
            UpdateCommentRequest(
                comment_id=str(comment.id), fine_id=str(fine.id), content="typo fixed"
            )
        )

        # Assert
        assert result.content == "typo fixed"
        assert result.is_edited is True
        assert result.updated_at >= comment.updated_at

    @pytest.mark.asyncio
    async def test_update_through_wrong_fine_is_not_found(self, unit_env):
        """A comment is only reachable through its own fine."""
        # Arrange
        comment_service, _, comment, _ = await _arrange(unit_env)
        use_case = UpdateCommentUseCase(comment_service=comment_service)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await use_case.execute(
                UpdateCommentRequest(
                    comment_id=str(comment.id), fine_id=str(uuid4()), content="Edit"
                )
            )

    @pytest.mark.asyncio
    async def test_update_by_non_author_is_forbidden(self, unit_env):
        # Arrange
        comment_service, fine, comment, _ = await _arrange(unit_env)
        (await unit_env.get(StaticAuthSession)).sign_in(make_user("Carol Other"))
        use_case = UpdateCommentUseCase(comment_service=comment_service)

        # Act & Assert
        with pytest.raises(ForbiddenError):
            await use_case.execute(
                UpdateCommentRequest(
                    comment_id=str(comment.id), fine_id=str(fine.id), content="Edit"
                )
            )

        comment_repo = await unit_env.get(CommentRepository)
        assert (await comment_repo.find_by_id(comment.id)).content == "typo fix needed"

    @pytest.mark.asyncio
    async def test_update_of_deleted_comment(self, unit_env):
        # Arrange
        comment_service, fine, comment, _ = await _arrange(unit_env)
        await comment_service.delete_comment(comment.id)
        use_case = UpdateCommentUseCase(comment_service=comment_service)

        # Act & Assert
        with pytest.raises(ContentDeletedError):
            await use_case.execute(
                UpdateCommentRequest(
                    comment_id=str(comment.id), fine_id=str(fine.id), content="Edit"
                )
            )


class TestDeleteCommentUseCase:
    """Tests for DeleteCommentUseCase."""

    @pytest.mark.asyncio
    async def test_delete_returns_marker(self, unit_env):
        # Arrange
        comment_service, fine, comment, _ = await _arrange(unit_env)
        use_case = DeleteCommentUseCase(comment_service=comment_service)

        # Act
        result = await use_case.execute(
            DeleteCommentRequest(comment_id=str(comment.id), fine_id=str(fine.id))
        )

        # Assert
        assert result.is_deleted is True
        assert result.content == "[deleted]"
        fine_repo = await unit_env.get(FineRepository)
        assert (await fine_repo.find_by_id(fine.id)).comment_count == 0

    @pytest.mark.asyncio
    async def test_delete_through_wrong_fine_is_not_found(self, unit_env):
        comment_service, _, comment, _ = await _arrange(unit_env)
        use_case = DeleteCommentUseCase(comment_service=comment_service)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                DeleteCommentRequest(comment_id=str(comment.id), fine_id=str(uuid4()))
            )
