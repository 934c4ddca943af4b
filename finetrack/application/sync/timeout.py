"""Bounded store calls for the sync layer."""

import asyncio
from typing import Awaitable, TypeVar

import logfire

from finetrack.domain.error import TransientStoreError

T = TypeVar("T")


async def with_timeout(call: Awaitable[T], timeout: float, operation: str) -> T:
    """Await a store call, turning a timeout into a retryable store error.

    Raises:
        TransientStoreError: If the call does not settle within ``timeout`` seconds
    """
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        logfire.warn("Store call timed out", operation=operation, timeout=timeout)
        raise TransientStoreError(
            f"{operation} did not complete within {timeout:g}s"
        ) from e
