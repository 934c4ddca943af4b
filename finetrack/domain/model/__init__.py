"""Domain model entities for the fine tracker."""

from finetrack.domain.model.comment import (
    Comment,
    CommentWithReplies,
    PendingComment,
    ThreadEntry,
)
from finetrack.domain.model.fine import Fine
from finetrack.domain.model.user import User

__all__ = [
    "Comment",
    "CommentWithReplies",
    "PendingComment",
    "ThreadEntry",
    "Fine",
    "User",
]
