"""PostgreSQL repository implementations."""

from finetrack.persistence.repository.comment import PostgresCommentRepository
from finetrack.persistence.repository.fine import PostgresFineRepository
from finetrack.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresCommentRepository",
    "PostgresFineRepository",
    "PostgresUserRepository",
]
