"""In-memory fine repository for testing."""

from typing import Optional

from finetrack.domain.model.common import utcnow
from finetrack.domain.model.fine import Fine
from finetrack.domain.repository.fine import FineRepository
from finetrack.domain.value import FineId


class InMemoryFineRepository(FineRepository):
    """In-memory implementation of FineRepository for testing."""

    def __init__(self) -> None:
        self._fines: dict[FineId, Fine] = {}

    async def find_by_id(self, fine_id: FineId) -> Optional[Fine]:
        """Find a fine by ID."""
        return self._fines.get(fine_id)

    async def save(self, fine: Fine) -> Fine:
        """Save or update a fine."""
        self._fines[fine.id] = fine
        return fine

    async def update_comment_count(self, fine_id: FineId, count: int) -> None:
        """Overwrite the fine's comment count (no-op for unknown fines)."""
        fine = self._fines.get(fine_id)
        if fine:
            self._fines[fine_id] = fine.model_copy(
                update={"comment_count": max(0, count), "updated_at": utcnow()}
            )
