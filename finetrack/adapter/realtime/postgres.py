"""PostgreSQL LISTEN/NOTIFY push channel.

The ``notify_comment_change`` trigger publishes every committed comment write
on the ``comment_changes`` channel as JSON::

    {"event": "INSERT" | "UPDATE" | "DELETE", "fine_id": "...", "record": {...}}

where ``record`` is the full row after the write. Rows too large for a NOTIFY
payload arrive with an ``id`` instead of a ``record`` and are loaded before
delivery. One dedicated asyncpg connection listens for the whole process and
fans notifications out to the handlers subscribed to the notification's fine.
"""

import asyncio
import json
from typing import Any, Optional
from uuid import UUID

import asyncpg
import logfire

from finetrack.adapter.error import PushChannelError
from finetrack.adapter.realtime.channel import (
    ChangeHandler,
    CommentChange,
    CommentChangeKind,
    PushChannel,
    Subscription,
)
from finetrack.domain.value import FineId
from finetrack.persistence.mappers import row_to_comment

LOAD_ROW_SQL = "SELECT row_to_json(c)::text FROM comments c WHERE c.id = $1"


def parse_notification(payload: str) -> CommentChange:
    """Turn a NOTIFY payload carrying a full row into a change.

    Raises:
        ValueError: If the payload is not a valid change notification
        KeyError: If a required field is missing
    """
    return _to_change(json.loads(payload))


def _to_change(data: dict[str, Any]) -> CommentChange:
    record = data["record"]
    if isinstance(record, str):
        record = json.loads(record)
    return CommentChange(
        kind=CommentChangeKind(data["event"]),
        comment=row_to_comment(record),
    )


class PostgresPushChannel(PushChannel):
    """Push channel backed by ``LISTEN`` on a dedicated connection."""

    def __init__(self, dsn: str, channel: str = "comment_changes") -> None:
        super().__init__()
        self._dsn = dsn
        self._channel = channel
        self._connection: Optional[asyncpg.Connection] = None
        self._lock = asyncio.Lock()
        self._pending_loads: set[asyncio.Task] = set()

    async def subscribe(self, fine_id: FineId, handler: ChangeHandler) -> Subscription:
        await self._ensure_listening()
        return self._register(fine_id, handler)

    async def close(self) -> None:
        await super().close()
        for task in list(self._pending_loads):
            task.cancel()

        async with self._lock:
            if self._connection is None:
                return
            connection, self._connection = self._connection, None
            if not connection.is_closed():
                await connection.remove_listener(self._channel, self._on_notification)
                await connection.close()
            logfire.info("Stopped listening for comment changes", channel=self._channel)

    async def _ensure_listening(self) -> None:
        async with self._lock:
            if self._connection is not None and not self._connection.is_closed():
                return

            try:
                connection = await asyncpg.connect(self._dsn)
                await connection.add_listener(self._channel, self._on_notification)
            except (OSError, asyncpg.PostgresError) as e:
                logfire.error(
                    "Failed to listen for comment changes",
                    channel=self._channel,
                    error=str(e),
                )
                raise PushChannelError(
                    f"Cannot listen on channel {self._channel}: {e}"
                ) from e

            self._connection = connection
            logfire.info("Listening for comment changes", channel=self._channel)

    def _on_notification(
        self,
        connection: asyncpg.Connection,
        pid: int,
        channel: str,
        payload: str,
    ) -> None:
        try:
            data = json.loads(payload)
            if "record" not in data:
                self._load_later(connection, CommentChangeKind(data["event"]), data["id"])
                return
            change = _to_change(data)
        except (ValueError, KeyError) as e:
            logfire.warn(
                "Ignoring malformed comment notification",
                channel=channel,
                error=str(e),
            )
            return

        self._dispatch(change)

    def _load_later(
        self, connection: asyncpg.Connection, kind: CommentChangeKind, comment_id: str
    ) -> None:
        task = asyncio.get_running_loop().create_task(
            self._load_and_dispatch(connection, kind, UUID(comment_id))
        )
        self._pending_loads.add(task)
        task.add_done_callback(self._pending_loads.discard)

    async def _load_and_dispatch(
        self, connection: asyncpg.Connection, kind: CommentChangeKind, comment_id: UUID
    ) -> None:
        try:
            record = await connection.fetchval(LOAD_ROW_SQL, comment_id)
        except (OSError, asyncpg.PostgresError) as e:
            logfire.error(
                "Failed to load notified comment",
                comment_id=str(comment_id),
                error=str(e),
            )
            return

        if record is None:
            logfire.warn("Notified comment no longer exists", comment_id=str(comment_id))
            return

        self._dispatch(_to_change({"event": kind.value, "record": record}))
