"""Comment routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from finetrack.application.usecase.comment import (
    CommentItem,
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    GetCommentCountResponse,
    GetCommentCountUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
    GetCommentUseCase,
    GetRecentCommentsRequest,
    GetRecentCommentsResponse,
    GetRecentCommentsUseCase,
    GetThreadedCommentsRequest,
    GetThreadedCommentsResponse,
    GetThreadedCommentsUseCase,
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)
from finetrack.domain.error import DomainError
from finetrack.domain.value import MAX_COMMENT_LENGTH, CommentSort
from finetrack.interface.error import to_http_exception

router = APIRouter(prefix="/fines", tags=["comments"], route_class=DishkaRoute)
feed_router = APIRouter(prefix="/comments", tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    # Trimmed length is checked by the domain; this only bounds the raw payload
    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH * 2)
    parent_id: str | None = None  # Root comment ID for replies


class UpdateCommentAPIRequest(BaseModel):
    """API request for updating a comment."""

    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH * 2)


@router.get("/{fine_id}/comments", response_model=GetCommentsResponse)
async def list_comments(
    fine_id: str,
    use_case: FromDishka[GetCommentsUseCase],
    sort: CommentSort = CommentSort.NEWEST,
    author_id: str | None = None,
    roots_only: bool = False,
    parent_id: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    search: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> GetCommentsResponse:
    """List a fine's comments as a flat list.

    Deleted comments are never returned.
    """
    try:
        return await use_case.execute(
            GetCommentsRequest(
                fine_id=fine_id,
                sort=sort,
                author_id=author_id,
                roots_only=roots_only,
                parent_id=parent_id,
                date_from=date_from,
                date_to=date_to,
                search=search,
                limit=limit,
            )
        )
    except (DomainError, ValueError) as e:
        raise to_http_exception(e) from e


@router.get("/{fine_id}/comments/threaded", response_model=GetThreadedCommentsResponse)
async def list_threaded_comments(
    fine_id: str,
    use_case: FromDishka[GetThreadedCommentsUseCase],
    sort: CommentSort = CommentSort.THREAD,
) -> GetThreadedCommentsResponse:
    """List a fine's comments as root threads with chronological replies."""
    try:
        return await use_case.execute(
            GetThreadedCommentsRequest(fine_id=fine_id, sort=sort)
        )
    except (DomainError, ValueError) as e:
        raise to_http_exception(e) from e


@router.get("/{fine_id}/comments/count", response_model=GetCommentCountResponse)
async def count_comments(
    fine_id: str,
    use_case: FromDishka[GetCommentCountUseCase],
) -> GetCommentCountResponse:
    try:
        return await use_case.execute(fine_id)
    except (DomainError, ValueError) as e:
        raise to_http_exception(e) from e


@router.post(
    "/{fine_id}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    fine_id: str,
    request: CreateCommentAPIRequest,
    use_case: FromDishka[CreateCommentUseCase],
) -> CreateCommentResponse:
    """Comment on a fine or reply to a root comment.

    Requires authentication. Replies to replies are rejected with 400.

    Args:
        fine_id: Fine UUID
        request: Comment content and optional parent
        use_case: Create comment use case from DI

    Returns:
        Created comment details

    Raises:
        HTTPException: If not authenticated, the fine or parent is missing,
            or the content or thread shape is invalid
    """
    try:
        return await use_case.execute(
            CreateCommentRequest(
                fine_id=fine_id,
                content=request.content,
                parent_id=request.parent_id,
            )
        )
    except (DomainError, ValueError) as e:
        raise to_http_exception(e) from e


@router.patch(
    "/{fine_id}/comments/{comment_id}", response_model=UpdateCommentResponse
)
async def update_comment(
    fine_id: str,
    comment_id: str,
    request: UpdateCommentAPIRequest,
    use_case: FromDishka[UpdateCommentUseCase],
) -> UpdateCommentResponse:
    """Edit a comment's content.

    Only the comment author can edit, and deleted comments cannot be edited.
    """
    try:
        return await use_case.execute(
            UpdateCommentRequest(
                comment_id=comment_id,
                fine_id=fine_id,
                content=request.content,
            )
        )
    except (DomainError, ValueError) as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{fine_id}/comments/{comment_id}", response_model=DeleteCommentResponse
)
async def delete_comment(
    fine_id: str,
    comment_id: str,
    use_case: FromDishka[DeleteCommentUseCase],
) -> DeleteCommentResponse:
    """Soft delete a comment (author only).

    The comment stays in place with its content replaced by the deletion
    marker. Deleting twice is harmless.
    """
    try:
        return await use_case.execute(
            DeleteCommentRequest(comment_id=comment_id, fine_id=fine_id)
        )
    except (DomainError, ValueError) as e:
        raise to_http_exception(e) from e


@feed_router.get("/recent", response_model=GetRecentCommentsResponse)
async def recent_comments(
    use_case: FromDishka[GetRecentCommentsUseCase],
    limit: int | None = Query(default=None, ge=1, le=100),
) -> GetRecentCommentsResponse:
    """Newest comments across all fines."""
    try:
        return await use_case.execute(GetRecentCommentsRequest(limit=limit))
    except DomainError as e:
        raise to_http_exception(e) from e


@feed_router.get("/{comment_id}", response_model=CommentItem)
async def get_comment(
    comment_id: str,
    use_case: FromDishka[GetCommentUseCase],
) -> CommentItem:
    try:
        return await use_case.execute(comment_id)
    except (DomainError, ValueError) as e:
        raise to_http_exception(e) from e
