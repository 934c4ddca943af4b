"""Domain value objects for comment threads.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from pydantic import model_validator

from finetrack.domain.error import ValidationError
from finetrack.domain.value.common import ValueObject
from finetrack.domain.value.identifiers import CommentId, FineId, UserId

if TYPE_CHECKING:
    from finetrack.domain.model.comment import Comment

MAX_COMMENT_LENGTH = 2000


class CommentSort(str, Enum):
    """Sort order for comment listings."""

    NEWEST = "newest"  # created_at DESC
    OLDEST = "oldest"  # created_at ASC
    THREAD = "thread"  # Grouped by thread; threaded views rank by latest activity


class CommentFilters(ValueObject):
    """Optional filters for a fine's comment listing.

    ``roots_only`` and ``parent_id`` together express parent presence:
    roots only, replies to one root, or (neither set) everything.
    """

    author_id: Optional[UserId] = None
    roots_only: bool = False
    parent_id: Optional[CommentId] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    search: Optional[str] = None

    @model_validator(mode="after")
    def validate_parent_presence(self) -> "CommentFilters":
        """Reject asking for roots and for one root's replies at once."""
        if self.roots_only and self.parent_id is not None:
            raise ValueError("roots_only and parent_id are mutually exclusive")
        return self

    def matches(self, comment: "Comment") -> bool:
        """Check whether a comment row would be returned under these filters."""
        if comment.is_deleted:
            return False
        if self.author_id is not None and comment.author_id != self.author_id:
            return False
        if self.roots_only and comment.parent_id is not None:
            return False
        if self.parent_id is not None and comment.parent_id != self.parent_id:
            return False
        if self.date_from is not None and comment.created_at < self.date_from:
            return False
        if self.date_to is not None and comment.created_at > self.date_to:
            return False
        if self.search:
            needle = self.search.lower()
            if (
                needle not in comment.content.lower()
                and needle not in comment.author_name.lower()
            ):
                return False
        return True


class CreateCommentInput(ValueObject):
    """Data a caller supplies to post a comment; author fields come from the session."""

    fine_id: FineId
    content: str
    parent_id: Optional[CommentId] = None


class UpdateCommentInput(ValueObject):
    """Data a caller supplies to edit a comment."""

    content: str


def normalize_content(content: str, max_length: int = MAX_COMMENT_LENGTH) -> str:
    """Trim comment content and enforce its length bounds.

    Args:
        content: Raw content as typed by the user
        max_length: Maximum allowed length after trimming

    Returns:
        Trimmed content

    Raises:
        ValidationError: If the trimmed content is empty or too long
    """
    trimmed = content.strip()
    if not trimmed:
        raise ValidationError("Comment cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"Comment is too long (max {max_length} characters)")
    return trimmed
