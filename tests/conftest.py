"""Test configuration and helpers."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from finetrack.domain.model import Comment, CommentWithReplies, Fine, User
from finetrack.domain.model.common import utcnow
from finetrack.domain.value import CommentId, FineId, UserId

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    """Fixed timestamp ``minutes`` after BASE_TIME, for deterministic ordering."""
    return BASE_TIME + timedelta(minutes=minutes)


def make_user(display_name: str = "Alice Example", username: str | None = None) -> User:
    """Helper to build a user profile."""
    return User(
        id=UserId(uuid4()),
        display_name=display_name,
        username=username or display_name.split()[0].lower(),
    )


def make_fine(comment_count: int = 0) -> Fine:
    """Helper to build a fine with a fresh id."""
    return Fine(
        id=FineId(uuid4()),
        description="Late to training",
        subject_name="Bob",
        proposer_name="Alice",
        comment_count=comment_count,
    )


def make_comment(
    fine_id: FineId,
    author: User | None = None,
    content: str = "Nice one",
    parent_id: CommentId | None = None,
    created_at: datetime | None = None,
    **overrides,
) -> Comment:
    """Helper to build a confirmed comment.

    Args:
        fine_id: Fine the comment belongs to
        author: Author profile (a fresh one when omitted)
        content: Comment text
        parent_id: Root comment ID for replies
        created_at: Creation time (also used as updated_at)
        **overrides: Any other Comment field

    Returns:
        Comment domain model
    """
    author = author or make_user()
    created_at = created_at or utcnow()
    fields = dict(
        id=CommentId(uuid4()),
        fine_id=fine_id,
        author_id=author.id,
        author_name=author.display_name,
        author_username=author.username,
        parent_id=parent_id,
        content=content,
        created_at=created_at,
        updated_at=created_at,
    )
    fields.update(overrides)
    return Comment(**fields)


def thread_of(root: Comment, *replies: Comment) -> CommentWithReplies:
    """Helper to build a thread with its reply count computed."""
    return CommentWithReplies.build(root, list(replies))
