"""Single comment and recent feed use cases."""

from uuid import UUID

from pydantic import BaseModel, Field

from finetrack.application.usecase.base import BaseUseCase
from finetrack.domain.service import CommentService
from finetrack.domain.value import CommentId

from .items import CommentItem


class GetCommentUseCase(BaseUseCase):
    """Use case for reading one comment by ID."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: str) -> CommentItem:
        """Execute get comment flow.

        Args:
            request: Comment UUID string

        Raises:
            NotFoundError: If the comment does not exist
        """
        comment = await self.comment_service.get_comment(CommentId(UUID(request)))
        return CommentItem.from_comment(comment)


class GetRecentCommentsRequest(BaseModel):
    """Recent comments request."""

    limit: int | None = Field(default=None, ge=1, le=100)


class GetRecentCommentsResponse(BaseModel):
    """Recent comments response."""

    comments: list[CommentItem]
    total: int


class GetRecentCommentsUseCase(BaseUseCase):
    """Use case for the activity feed across all fines."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(
        self, request: GetRecentCommentsRequest
    ) -> GetRecentCommentsResponse:
        comments = await self.comment_service.recent_comments(request.limit)
        items = [CommentItem.from_comment(c) for c in comments]
        return GetRecentCommentsResponse(comments=items, total=len(items))
