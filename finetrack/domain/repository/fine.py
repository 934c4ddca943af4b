"""Fine repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from finetrack.domain.model.fine import Fine
from finetrack.domain.value import FineId


class FineRepository(ABC):
    """Repository for the parts of Fine the comment system touches."""

    @abstractmethod
    async def find_by_id(self, fine_id: FineId) -> Optional[Fine]:
        """Find a fine by ID.

        Args:
            fine_id: The fine's unique identifier

        Returns:
            The fine if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, fine: Fine) -> Fine:
        """Save a fine (create or update)."""
        pass

    @abstractmethod
    async def update_comment_count(self, fine_id: FineId, count: int) -> None:
        """Overwrite the denormalized comment count of a fine.

        Args:
            fine_id: The fine ID
            count: Freshly recomputed number of non-deleted comments
        """
        pass
