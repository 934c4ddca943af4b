"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from finetrack.domain.model import Comment, Fine, User
from finetrack.domain.value import CommentId, FineId, UserId


def _as_uuid(value: Any) -> Optional[UUID]:
    """Accept UUIDs from the driver or strings from JSON payloads."""
    if value is None:
        return None
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_as_uuid(row["id"])),
        display_name=row["display_name"],
        username=row["username"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict."""
    return user.model_dump()


def row_to_fine(row: Dict[str, Any]) -> Fine:
    """Convert database row to Fine domain model.

    Args:
        row: Database row as dict

    Returns:
        Fine domain model
    """
    return Fine(
        id=FineId(_as_uuid(row["id"])),
        description=row["description"],
        subject_name=row["subject_name"],
        proposer_name=row["proposer_name"],
        comment_count=row.get("comment_count") or 0,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def fine_to_dict(fine: Fine) -> Dict[str, Any]:
    """Convert Fine domain model to database dict."""
    return fine.model_dump()


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Also used for the JSON row snapshots carried by change notifications,
    where ids and timestamps arrive as strings.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    parent_id = _as_uuid(row.get("parent_id"))
    return Comment(
        id=CommentId(_as_uuid(row["id"])),
        fine_id=FineId(_as_uuid(row["fine_id"])),
        author_id=UserId(_as_uuid(row["author_id"])),
        author_name=row["author_name"],
        author_username=row["author_username"],
        parent_id=CommentId(parent_id) if parent_id else None,
        content=row["content"],
        is_deleted=bool(row.get("is_deleted")),
        is_edited=bool(row.get("is_edited")),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return comment.model_dump(exclude={"kind"})
