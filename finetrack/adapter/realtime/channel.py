"""Push channel for comment changes.

A push channel delivers a full row snapshot of every comment written on a
fine, in commit order, to the handlers subscribed to that fine. Handlers are
plain synchronous callables: they only touch the in-process cache and run to
completion before the next change is delivered.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from enum import Enum
from typing import Callable, Optional

import logfire

from finetrack.domain.model.comment import Comment
from finetrack.domain.value import FineId
from finetrack.domain.value.common import ValueObject


class CommentChangeKind(str, Enum):
    """Kind of write behind a change notification."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"  # Soft delete; the row still exists with is_deleted=True


class CommentChange(ValueObject):
    """A committed write together with the row as it now exists."""

    kind: CommentChangeKind
    comment: Comment

    @property
    def fine_id(self) -> FineId:
        return self.comment.fine_id


ChangeHandler = Callable[[CommentChange], None]


class Subscription:
    """Handle returned by ``PushChannel.subscribe``."""

    def __init__(self, fine_id: FineId, cancel: Callable[[], None]) -> None:
        self.fine_id = fine_id
        self._cancel: Optional[Callable[[], None]] = cancel

    @property
    def active(self) -> bool:
        return self._cancel is not None

    def unsubscribe(self) -> None:
        """Stop delivery to this subscription. Safe to call twice."""
        if self._cancel is not None:
            cancel, self._cancel = self._cancel, None
            cancel()


class PushChannel(ABC):
    """Source of comment change notifications scoped by fine."""

    def __init__(self) -> None:
        self._handlers: dict[FineId, list[ChangeHandler]] = defaultdict(list)

    @abstractmethod
    async def subscribe(self, fine_id: FineId, handler: ChangeHandler) -> Subscription:
        """Start delivering changes for ``fine_id`` to ``handler``."""
        pass

    async def close(self) -> None:
        """Release the channel's resources."""
        self._handlers.clear()

    def subscriber_count(self, fine_id: FineId) -> int:
        return len(self._handlers.get(fine_id, ()))

    def _register(self, fine_id: FineId, handler: ChangeHandler) -> Subscription:
        self._handlers[fine_id].append(handler)

        def cancel() -> None:
            handlers = self._handlers.get(fine_id)
            if handlers and handler in handlers:
                handlers.remove(handler)
            if not handlers:
                self._handlers.pop(fine_id, None)

        return Subscription(fine_id, cancel)

    def _dispatch(self, change: CommentChange) -> int:
        """Deliver ``change`` to the fine's handlers in subscription order."""
        handlers = list(self._handlers.get(change.fine_id, ()))
        for handler in handlers:
            handler(change)
        return len(handlers)


class InMemoryPushChannel(PushChannel):
    """In-process push channel; changes are published by the caller.

    Used by tests and single-process deployments where writes and viewers
    share an event loop.
    """

    async def subscribe(self, fine_id: FineId, handler: ChangeHandler) -> Subscription:
        return self._register(fine_id, handler)

    def publish(self, change: CommentChange) -> int:
        """Deliver a change synchronously.

        Returns:
            Number of handlers that received it
        """
        delivered = self._dispatch(change)
        logfire.debug(
            "Comment change published",
            kind=change.kind.value,
            comment_id=str(change.comment.id),
            fine_id=str(change.fine_id),
            delivered=delivered,
        )
        return delivered
