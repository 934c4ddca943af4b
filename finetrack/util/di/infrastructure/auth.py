"""Auth session providers."""

from uuid import UUID

from dishka import Scope, provide
from fastapi import Request

from finetrack.config import AuthSettings
from finetrack.domain.repository import UserRepository
from finetrack.domain.service import AuthSession, JWTService, StaticAuthSession
from finetrack.domain.value import UserId
from finetrack.util.di.base import ProviderBase


class AuthProvider(ProviderBase):
    """Auth component base."""

    __mock_component__ = "auth"
    __depends_on__ = {"persistence"}


class ProdAuthProvider(AuthProvider):
    """Resolve the caller from the session cookie of the current request."""

    __is_mock__ = False

    @provide(scope=Scope.REQUEST)
    async def get_auth_session(
        self,
        request: Request,
        jwt_service: JWTService,
        user_repository: UserRepository,
        auth_settings: AuthSettings,
    ) -> AuthSession:
        """Provide the caller's session; anonymous when the cookie is missing or invalid."""
        token = request.cookies.get(auth_settings.cookie_name)
        user_id = jwt_service.get_user_id_from_token(token)
        if not user_id:
            return StaticAuthSession()

        user = await user_repository.find_by_id(UserId(UUID(user_id)))
        return StaticAuthSession(user)
