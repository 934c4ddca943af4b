"""Create comment use case."""

from uuid import UUID

from pydantic import BaseModel

from finetrack.application.usecase.base import BaseUseCase
from finetrack.domain.service import CommentService
from finetrack.domain.value import CommentId, CreateCommentInput, FineId

from .items import CommentItem


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    fine_id: str  # UUID string
    content: str
    parent_id: str | None = None  # Root comment ID for replies


class CreateCommentResponse(CommentItem):
    """Create comment response."""


class CreateCommentUseCase(BaseUseCase):
    """Use case for commenting on a fine or replying to a root comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service, bound to the caller's session
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        The service validates the parent, stamps the author from the session
        and recounts the fine's comments.

        Args:
            request: Create comment request

        Returns:
            Created comment

        Raises:
            ValueError: If an id is not a valid UUID
            DomainError: If the service rejects the comment
        """
        parent_id = CommentId(UUID(request.parent_id)) if request.parent_id else None
        comment = await self.comment_service.create_comment(
            CreateCommentInput(
                fine_id=FineId(UUID(request.fine_id)),
                content=request.content,
                parent_id=parent_id,
            )
        )
        return CreateCommentResponse.from_comment(comment)
