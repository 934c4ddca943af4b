"""Unit tests for push channels."""

import json
from uuid import uuid4

import pytest

from finetrack.adapter.realtime import (
    CommentChange,
    CommentChangeKind,
    InMemoryPushChannel,
    PostgresPushChannel,
    parse_notification,
)
from finetrack.domain.value import FineId
from tests.conftest import make_comment

FINE_ID = FineId(uuid4())


def _row(comment) -> dict:
    """Comment as row_to_json renders it."""
    return {
        "id": str(comment.id),
        "fine_id": str(comment.fine_id),
        "author_id": str(comment.author_id),
        "author_name": comment.author_name,
        "author_username": comment.author_username,
        "parent_id": str(comment.parent_id) if comment.parent_id else None,
        "content": comment.content,
        "is_deleted": comment.is_deleted,
        "is_edited": comment.is_edited,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
    }


class TestInMemoryPushChannel:
    """Tests for InMemoryPushChannel."""

    @pytest.mark.asyncio
    async def test_publish_reaches_fine_subscribers_in_order(self):
        # Arrange
        channel = InMemoryPushChannel()
        received = []
        await channel.subscribe(FINE_ID, lambda c: received.append(("first", c)))
        await channel.subscribe(FINE_ID, lambda c: received.append(("second", c)))
        change = CommentChange(
            kind=CommentChangeKind.INSERT, comment=make_comment(FINE_ID)
        )

        # Act
        delivered = channel.publish(change)

        # Assert
        assert delivered == 2
        assert received == [("first", change), ("second", change)]

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_delivery(self):
        # Arrange
        channel = InMemoryPushChannel()
        received = []
        subscription = await channel.subscribe(FINE_ID, received.append)

        # Act
        subscription.unsubscribe()
        subscription.unsubscribe()
        delivered = channel.publish(
            CommentChange(kind=CommentChangeKind.INSERT, comment=make_comment(FINE_ID))
        )

        # Assert
        assert delivered == 0
        assert received == []
        assert not subscription.active
        assert channel.subscriber_count(FINE_ID) == 0

    @pytest.mark.asyncio
    async def test_close_drops_all_subscribers(self):
        channel = InMemoryPushChannel()
        await channel.subscribe(FINE_ID, lambda c: None)

        await channel.close()

        assert channel.subscriber_count(FINE_ID) == 0


class TestParseNotification:
    """Tests for parsing NOTIFY payloads."""

    def test_full_row_payload(self):
        # Arrange
        comment = make_comment(FINE_ID)
        payload = json.dumps(
            {"event": "INSERT", "fine_id": str(FINE_ID), "record": _row(comment)}
        )

        # Act
        change = parse_notification(payload)

        # Assert
        assert change.kind is CommentChangeKind.INSERT
        assert change.comment == comment
        assert change.fine_id == FINE_ID

    def test_soft_delete_payload(self):
        # Arrange
        root = make_comment(FINE_ID)
        deleted = make_comment(
            FINE_ID, parent_id=root.id, content="[deleted]", is_deleted=True
        )
        payload = json.dumps(
            {"event": "DELETE", "fine_id": str(FINE_ID), "record": _row(deleted)}
        )

        # Act
        change = parse_notification(payload)

        # Assert
        assert change.kind is CommentChangeKind.DELETE
        assert change.comment.is_deleted
        assert change.comment.parent_id == root.id

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            json.dumps({"event": "INSERT"}),
            json.dumps({"event": "TRUNCATE", "record": {}}),
        ],
    )
    def test_malformed_payloads_raise(self, payload):
        with pytest.raises((ValueError, KeyError)):
            parse_notification(payload)


class TestPostgresPushChannelDispatch:
    """Notification handling without a database connection."""

    @pytest.mark.asyncio
    async def test_notification_is_dispatched_to_fine_handlers(self):
        # Arrange
        channel = PostgresPushChannel(dsn="postgresql://unused")
        received = []
        channel._register(FINE_ID, received.append)
        comment = make_comment(FINE_ID)
        payload = json.dumps(
            {"event": "UPDATE", "fine_id": str(FINE_ID), "record": _row(comment)}
        )

        # Act
        channel._on_notification(None, 1, "comment_changes", payload)

        # Assert
        assert len(received) == 1
        assert received[0].kind is CommentChangeKind.UPDATE

    @pytest.mark.asyncio
    async def test_malformed_notification_is_ignored(self):
        channel = PostgresPushChannel(dsn="postgresql://unused")
        received = []
        channel._register(FINE_ID, received.append)

        channel._on_notification(None, 1, "comment_changes", "{broken")

        assert received == []
