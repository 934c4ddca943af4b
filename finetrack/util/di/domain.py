"""Domain layer DI providers."""

from dishka import Scope, provide

from finetrack.config import AuthSettings, CommentSettings
from finetrack.domain.repository import (
    CommentRepository,
    FineRepository,
    UserRepository,
)
from finetrack.domain.service import AuthSession, CommentService, JWTService
from finetrack.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction
    and the caller's auth session.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        fine_repository: FineRepository,
        user_repository: UserRepository,
        auth: AuthSession,
        settings: CommentSettings,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            fine_repository=fine_repository,
            user_repository=user_repository,
            auth=auth,
            settings=settings,
        )
