"""Authentication collaborator.

Session management happens outside the comment system. Everything that needs
to know who is acting asks an ``AuthSession`` for the current user.
"""

from abc import ABC, abstractmethod

from finetrack.domain.model.user import User


class AuthSession(ABC):
    """Synchronous accessor for the signed-in user."""

    @abstractmethod
    def current_user(self) -> User | None:
        """Return the signed-in user, or None when nobody is signed in."""
        pass

    @property
    def is_authenticated(self) -> bool:
        return self.current_user() is not None


class StaticAuthSession(AuthSession):
    """Session resolved once up front (per request, or per client process)."""

    def __init__(self, user: User | None = None) -> None:
        self._user = user

    def current_user(self) -> User | None:
        return self._user

    def sign_in(self, user: User) -> None:
        self._user = user

    def sign_out(self) -> None:
        self._user = None
