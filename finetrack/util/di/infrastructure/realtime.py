"""Push channel providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from finetrack.adapter.realtime import PostgresPushChannel, PushChannel
from finetrack.config import Settings
from finetrack.util.di.base import ProviderBase


class RealtimeProvider(ProviderBase):
    """Realtime component base."""

    __mock_component__ = "realtime"


class ProdRealtimeProvider(RealtimeProvider):
    """Production push channel listening on PostgreSQL notifications."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_push_channel(self, settings: Settings) -> AsyncIterator[PushChannel]:
        """Provide the push channel, closed with the container."""
        channel = PostgresPushChannel(
            dsn=settings.database.dsn,
            channel=settings.sync.notify_channel,
        )
        yield channel
        await channel.close()
