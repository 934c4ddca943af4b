"""Comment entities.

Comments form two-level threads on a fine: root comments (``parent_id`` is
None) and flat replies to a root. Replies to replies are rejected at write
time, so a thread never grows deeper than one level.

A comment exists in one of two shapes, told apart by ``kind``:
- ``Comment`` ("confirmed"): a row that the store has persisted
- ``PendingComment`` ("pending"): a local placeholder shown while the write
  is in flight; its id is a ``temp-`` string that can never equal a UUID
"""

import itertools
import time
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from finetrack.domain.model.common import DomainModel, utcnow
from finetrack.domain.value import (
    MAX_COMMENT_LENGTH,
    CommentId,
    FineId,
    TempCommentId,
    UserId,
)

_temp_sequence = itertools.count()


class Comment(DomainModel):
    """Persisted comment on a fine.

    Author fields are a snapshot taken at creation time and are not
    refreshed if the author later renames themselves.
    """

    kind: Literal["confirmed"] = "confirmed"
    id: CommentId
    fine_id: FineId
    author_id: UserId
    author_name: str = Field(min_length=1)
    author_username: str = Field(min_length=1)
    parent_id: Optional[CommentId] = None
    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)
    is_deleted: bool = False
    is_edited: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_pending(self) -> bool:
        return False

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


class PendingComment(DomainModel):
    """Optimistic placeholder for a comment that has not been confirmed yet."""

    kind: Literal["pending"] = "pending"
    id: TempCommentId
    fine_id: FineId
    author_id: UserId
    author_name: str
    author_username: str
    parent_id: Optional[CommentId] = None
    content: str
    is_deleted: bool = False
    is_edited: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_pending(self) -> bool:
        return True

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @staticmethod
    def new_temp_id() -> TempCommentId:
        """Time-based temporary id, unique within the process."""
        return TempCommentId(f"temp-{time.time_ns()}-{next(_temp_sequence)}")


ThreadEntry = Annotated[Union[Comment, PendingComment], Field(discriminator="kind")]


class CommentWithReplies(DomainModel):
    """A root comment with its flat, chronologically ordered replies.

    Derived view only; rebuilt on every fetch or cache mutation and never
    persisted. ``reply_count`` counts non-deleted replies.
    """

    root: ThreadEntry
    replies: list[ThreadEntry] = Field(default_factory=list)
    reply_count: int = Field(default=0, ge=0)

    @property
    def id(self) -> CommentId | TempCommentId:
        return self.root.id

    @property
    def latest_activity(self) -> datetime:
        """Later of the root's creation and its newest reply."""
        return max([self.root.created_at, *(r.created_at for r in self.replies)])

    @classmethod
    def build(
        cls, root: Comment | PendingComment, replies: list | None = None
    ) -> "CommentWithReplies":
        """Create a thread, computing ``reply_count`` from the replies."""
        replies = list(replies or [])
        return cls(
            root=root,
            replies=replies,
            reply_count=sum(1 for r in replies if not r.is_deleted),
        )

    def with_root(self, root: Comment | PendingComment) -> "CommentWithReplies":
        return CommentWithReplies.build(root, self.replies)

    def with_replies(self, replies: list) -> "CommentWithReplies":
        return CommentWithReplies.build(self.root, replies)
