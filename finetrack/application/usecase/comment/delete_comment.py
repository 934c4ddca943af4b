"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from finetrack.application.usecase.base import BaseUseCase
from finetrack.domain.error import NotFoundError
from finetrack.domain.service import CommentService
from finetrack.domain.value import CommentId

from .items import CommentItem


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str  # UUID string
    fine_id: str  # UUID string (for validation)


class DeleteCommentResponse(CommentItem):
    """Soft deleted comment, content replaced by the deletion marker."""


class DeleteCommentUseCase(BaseUseCase):
    """Use case for soft deleting a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        comment_id = CommentId(UUID(request.comment_id))

        existing = await self.comment_service.get_comment(comment_id)
        if str(existing.fine_id) != str(UUID(request.fine_id)):
            raise NotFoundError("Comment", request.comment_id)

        deleted = await self.comment_service.delete_comment(comment_id)
        return DeleteCommentResponse.from_comment(deleted)
