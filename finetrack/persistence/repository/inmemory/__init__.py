"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .fine import InMemoryFineRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryFineRepository",
    "InMemoryUserRepository",
]
