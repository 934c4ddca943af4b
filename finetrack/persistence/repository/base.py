"""Shared plumbing for PostgreSQL repositories."""

from typing import Any

import logfire
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from finetrack.domain.error import TransientStoreError


class PostgresRepository:
    """Base for repositories bound to a request-scoped session."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _execute(self, stmt: Any) -> Any:
        """Execute a statement, reporting driver failures as transient."""
        try:
            return await self.session.execute(stmt)
        except IntegrityError:
            # Constraint violations are bugs, not outages
            raise
        except DBAPIError as e:
            logfire.error(
                "Database statement failed",
                error=str(e.orig) if e.orig is not None else str(e),
                connection_invalidated=e.connection_invalidated,
            )
            raise TransientStoreError("The comment store is unavailable") from e

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError:
            raise
        except DBAPIError as e:
            raise TransientStoreError("The comment store is unavailable") from e
