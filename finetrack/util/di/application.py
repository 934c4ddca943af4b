"""Application layer DI providers."""

from dishka import Scope, provide

from finetrack.adapter.realtime import PushChannel
from finetrack.application.sync import (
    CommentMutations,
    CommentQueries,
    LiveCommentUpdates,
    OptimisticCommentWriter,
    QueryCache,
)
from finetrack.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    GetCommentCountUseCase,
    GetCommentsUseCase,
    GetCommentUseCase,
    GetRecentCommentsUseCase,
    GetThreadedCommentsUseCase,
    UpdateCommentUseCase,
)
from finetrack.config import SyncSettings
from finetrack.domain.service import CommentService
from finetrack.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    @provide
    def get_comments_use_case(
        self, comment_service: CommentService
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(comment_service=comment_service)

    @provide
    def get_threaded_comments_use_case(
        self, comment_service: CommentService
    ) -> GetThreadedCommentsUseCase:
        """Provide get threaded comments use case."""
        return GetThreadedCommentsUseCase(comment_service=comment_service)

    @provide
    def get_comment_count_use_case(
        self, comment_service: CommentService
    ) -> GetCommentCountUseCase:
        return GetCommentCountUseCase(comment_service=comment_service)

    @provide
    def get_comment_use_case(self, comment_service: CommentService) -> GetCommentUseCase:
        return GetCommentUseCase(comment_service=comment_service)

    @provide
    def get_recent_comments_use_case(
        self, comment_service: CommentService
    ) -> GetRecentCommentsUseCase:
        return GetRecentCommentsUseCase(comment_service=comment_service)

    @provide
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide
    def get_update_comment_use_case(
        self, comment_service: CommentService
    ) -> UpdateCommentUseCase:
        """Provide update comment use case."""
        return UpdateCommentUseCase(comment_service=comment_service)

    @provide
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)


class ProdSyncProvider(ProviderBase):
    """Client-side cache and sync components - concrete, no mocks needed.

    The cache lives for the whole process; the components that use it are
    built per request (or per test) around the caller's comment service.
    """

    @provide(scope=Scope.APP)
    def get_query_cache(self) -> QueryCache:
        """Provide the process-wide query cache."""
        return QueryCache()

    @provide(scope=Scope.REQUEST)
    def get_comment_queries(
        self,
        comment_service: CommentService,
        cache: QueryCache,
        settings: SyncSettings,
    ) -> CommentQueries:
        return CommentQueries(comment_service, cache, settings)

    @provide(scope=Scope.REQUEST)
    def get_comment_mutations(
        self,
        comment_service: CommentService,
        cache: QueryCache,
        settings: SyncSettings,
    ) -> CommentMutations:
        return CommentMutations(comment_service, cache, settings)

    @provide(scope=Scope.REQUEST)
    def get_optimistic_writer(
        self,
        comment_service: CommentService,
        cache: QueryCache,
        settings: SyncSettings,
    ) -> OptimisticCommentWriter:
        return OptimisticCommentWriter(comment_service, cache, settings)

    @provide(scope=Scope.REQUEST)
    def get_live_updates(
        self,
        cache: QueryCache,
        channel: PushChannel,
        settings: SyncSettings,
    ) -> LiveCommentUpdates:
        return LiveCommentUpdates(cache, channel, settings)
