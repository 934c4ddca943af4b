"""Get comments use cases."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from finetrack.application.usecase.base import BaseUseCase
from finetrack.domain.service import CommentService
from finetrack.domain.value import (
    CommentFilters,
    CommentId,
    CommentSort,
    FineId,
    UserId,
)

from .items import CommentItem, ThreadItem


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    fine_id: str  # UUID string
    sort: CommentSort = CommentSort.NEWEST
    author_id: str | None = None
    roots_only: bool = False
    parent_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    search: str | None = None
    limit: int | None = Field(default=None, ge=1, le=500)

    def to_filters(self) -> CommentFilters | None:
        """Build domain filters, or None when no filter is set."""
        filters = CommentFilters(
            author_id=UserId(UUID(self.author_id)) if self.author_id else None,
            roots_only=self.roots_only,
            parent_id=CommentId(UUID(self.parent_id)) if self.parent_id else None,
            date_from=self.date_from,
            date_to=self.date_to,
            search=self.search or None,
        )
        return None if filters == CommentFilters() else filters


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    fine_id: str
    comments: list[CommentItem]
    total: int


class GetCommentsUseCase(BaseUseCase):
    """Use case for listing a fine's comments as a flat list."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Raises:
            ValueError: If an id is malformed or the filters contradict each other
        """
        comments = await self.comment_service.list_comments(
            FineId(UUID(request.fine_id)),
            filters=request.to_filters(),
            sort=request.sort,
            limit=request.limit,
        )
        items = [CommentItem.from_comment(c) for c in comments]
        return GetCommentsResponse(
            fine_id=request.fine_id,
            comments=items,
            total=len(items),
        )


class GetThreadedCommentsRequest(BaseModel):
    """Get threaded comments request."""

    fine_id: str  # UUID string
    sort: CommentSort = CommentSort.THREAD


class GetThreadedCommentsResponse(BaseModel):
    """Get threaded comments response."""

    fine_id: str
    threads: list[ThreadItem]
    total: int


class GetThreadedCommentsUseCase(BaseUseCase):
    """Use case for listing a fine's comments as root threads with replies."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(
        self, request: GetThreadedCommentsRequest
    ) -> GetThreadedCommentsResponse:
        threads = await self.comment_service.list_threads(
            FineId(UUID(request.fine_id)), sort=request.sort
        )
        return GetThreadedCommentsResponse(
            fine_id=request.fine_id,
            threads=[ThreadItem.from_thread(t) for t in threads],
            total=len(threads),
        )


class GetCommentCountResponse(BaseModel):
    """Comment count response."""

    fine_id: str
    count: int


class GetCommentCountUseCase(BaseUseCase):
    """Use case for counting a fine's non-deleted comments."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: str) -> GetCommentCountResponse:
        count = await self.comment_service.count_comments(FineId(UUID(request)))
        return GetCommentCountResponse(fine_id=request, count=count)
