"""Repository interfaces for the fine tracker domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from finetrack.domain.repository.comment import CommentRepository
from finetrack.domain.repository.fine import FineRepository
from finetrack.domain.repository.user import UserRepository

__all__ = [
    "CommentRepository",
    "FineRepository",
    "UserRepository",
]
