"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from finetrack.domain.model.user import User
from finetrack.domain.value import UserId


class UserRepository(ABC):
    """Repository for user profiles."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user profile."""
        pass
