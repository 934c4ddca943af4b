"""Update comment use case."""

from uuid import UUID

from pydantic import BaseModel

from finetrack.application.usecase.base import BaseUseCase
from finetrack.domain.error import NotFoundError
from finetrack.domain.service import CommentService
from finetrack.domain.value import CommentId, UpdateCommentInput

from .items import CommentItem


class UpdateCommentRequest(BaseModel):
    """Update comment request."""

    comment_id: str  # UUID string
    fine_id: str  # UUID string (for validation)
    content: str  # New content (required, cannot be empty)


class UpdateCommentResponse(CommentItem):
    """Update comment response."""


class UpdateCommentUseCase(BaseUseCase):
    """Use case for editing a comment's content."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: UpdateCommentRequest) -> UpdateCommentResponse:
        """Execute update comment flow.

        Args:
            request: Update comment request with comment ID, fine ID and new content

        Returns:
            Updated comment

        Raises:
            NotFoundError: If the comment does not exist on the given fine
            ForbiddenError: If the caller is not the author
            ContentDeletedError: If the comment has been deleted
        """
        comment_id = CommentId(UUID(request.comment_id))

        # Comment must belong to the fine in the URL
        existing = await self.comment_service.get_comment(comment_id)
        if str(existing.fine_id) != str(UUID(request.fine_id)):
            raise NotFoundError("Comment", request.comment_id)

        updated = await self.comment_service.update_comment(
            comment_id, UpdateCommentInput(content=request.content)
        )
        return UpdateCommentResponse.from_comment(updated)
