"""Domain value objects for the fine tracker."""

from finetrack.domain.value.identifiers import (
    CommentId,
    FineId,
    TempCommentId,
    UserId,
)
from finetrack.domain.value.types import (
    MAX_COMMENT_LENGTH,
    CommentFilters,
    CommentSort,
    CreateCommentInput,
    UpdateCommentInput,
    normalize_content,
)

__all__ = [
    # Identifiers
    "UserId",
    "FineId",
    "CommentId",
    "TempCommentId",
    # Types
    "CommentSort",
    "CommentFilters",
    "CreateCommentInput",
    "UpdateCommentInput",
    "MAX_COMMENT_LENGTH",
    "normalize_content",
]
