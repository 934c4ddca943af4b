"""Strongly typed identifiers for fine tracker entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
FineId = NewType("FineId", UUID)
CommentId = NewType("CommentId", UUID)

# Placeholder comments use string ids ("temp-<ns>") that never parse as UUIDs
TempCommentId = NewType("TempCommentId", str)
