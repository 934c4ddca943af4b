"""Realtime comment change delivery."""

from finetrack.adapter.realtime.channel import (
    ChangeHandler,
    CommentChange,
    CommentChangeKind,
    InMemoryPushChannel,
    PushChannel,
    Subscription,
)
from finetrack.adapter.realtime.postgres import PostgresPushChannel, parse_notification

__all__ = [
    "ChangeHandler",
    "CommentChange",
    "CommentChangeKind",
    "InMemoryPushChannel",
    "PostgresPushChannel",
    "PushChannel",
    "Subscription",
    "parse_notification",
]
