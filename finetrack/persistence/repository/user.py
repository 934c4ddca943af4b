"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import select

from finetrack.domain.model import User
from finetrack.domain.repository import UserRepository
from finetrack.domain.value import UserId
from finetrack.persistence.mappers import row_to_user, user_to_dict
from finetrack.persistence.repository.base import PostgresRepository
from finetrack.persistence.tables import users_table


class PostgresUserRepository(PostgresRepository, UserRepository):
    """PostgreSQL implementation of UserRepository."""

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self._execute(stmt)
        row = result.fetchone()
        return row_to_user(row._asdict()) if row else None

    async def save(self, user: User) -> User:
        """Save a user profile."""
        existing = await self.find_by_id(user.id)
        user_dict = user_to_dict(user)

        if existing:
            stmt = (
                users_table.update()
                .where(users_table.c.id == user.id)
                .values(**user_dict)
            )
        else:
            stmt = users_table.insert().values(**user_dict)

        await self._execute(stmt)
        await self._flush()
        return user
