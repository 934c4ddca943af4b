"""Comment use cases."""

from .create_comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
)
from .delete_comment import (
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from .get_comment import (
    GetCommentUseCase,
    GetRecentCommentsRequest,
    GetRecentCommentsResponse,
    GetRecentCommentsUseCase,
)
from .get_comments import (
    GetCommentCountResponse,
    GetCommentCountUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
    GetThreadedCommentsRequest,
    GetThreadedCommentsResponse,
    GetThreadedCommentsUseCase,
)
from .items import CommentItem, ThreadItem
from .update_comment import (
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)

__all__ = [
    "CommentItem",
    "CreateCommentRequest",
    "CreateCommentResponse",
    "CreateCommentUseCase",
    "DeleteCommentRequest",
    "DeleteCommentResponse",
    "DeleteCommentUseCase",
    "GetCommentCountResponse",
    "GetCommentCountUseCase",
    "GetCommentUseCase",
    "GetCommentsRequest",
    "GetCommentsResponse",
    "GetCommentsUseCase",
    "GetRecentCommentsRequest",
    "GetRecentCommentsResponse",
    "GetRecentCommentsUseCase",
    "GetThreadedCommentsRequest",
    "GetThreadedCommentsResponse",
    "GetThreadedCommentsUseCase",
    "ThreadItem",
    "UpdateCommentRequest",
    "UpdateCommentResponse",
    "UpdateCommentUseCase",
]
