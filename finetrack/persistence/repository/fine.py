"""PostgreSQL implementation of Fine repository."""

from typing import Optional

from sqlalchemy import select

from finetrack.domain.model import Fine
from finetrack.domain.model.common import utcnow
from finetrack.domain.repository import FineRepository
from finetrack.domain.value import FineId
from finetrack.persistence.mappers import fine_to_dict, row_to_fine
from finetrack.persistence.repository.base import PostgresRepository
from finetrack.persistence.tables import fines_table


class PostgresFineRepository(PostgresRepository, FineRepository):
    """PostgreSQL implementation of FineRepository."""

    async def find_by_id(self, fine_id: FineId) -> Optional[Fine]:
        """Find a fine by ID."""
        stmt = select(fines_table).where(fines_table.c.id == fine_id)
        result = await self._execute(stmt)
        row = result.fetchone()
        return row_to_fine(row._asdict()) if row else None

    async def save(self, fine: Fine) -> Fine:
        """Save a fine (create or update)."""
        existing = await self.find_by_id(fine.id)
        fine_dict = fine_to_dict(fine)

        if existing:
            stmt = (
                fines_table.update()
                .where(fines_table.c.id == fine.id)
                .values(**fine_dict)
            )
        else:
            stmt = fines_table.insert().values(**fine_dict)

        await self._execute(stmt)
        await self._flush()
        return await self.find_by_id(fine.id) or fine

    async def update_comment_count(self, fine_id: FineId, count: int) -> None:
        """Overwrite the fine's comment count."""
        stmt = (
            fines_table.update()
            .where(fines_table.c.id == fine_id)
            .values(comment_count=max(0, count), updated_at=utcnow())
        )
        await self._execute(stmt)
        await self._flush()
