"""Cancellation helpers for request-scoped outbound work.

Plain (non-streaming) FastAPI handlers keep running after the HTTP client
went away. Provider calls are paid per request, so they are tied to the
lifetime of the inbound connection instead.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable
from typing import Protocol, TypeVar

from maos_ai.shared.exceptions import MaosError

_T = TypeVar("_T")

DISCONNECT_POLL_INTERVAL = 0.25


class _Disconnectable(Protocol):
    async def is_disconnected(self) -> bool: ...


class ClientDisconnected(MaosError):
    """The inbound caller disconnected before the response was ready."""

    def __init__(self) -> None:
        super().__init__("Client disconnected")


async def cancel_on_disconnect(
    request: _Disconnectable,
    awaitable: Awaitable[_T],
    poll_interval: float = DISCONNECT_POLL_INTERVAL,
) -> _T:
    """Await ``awaitable`` but cancel it as soon as the caller disconnects.

    A cancelled attempt is discarded in full; partial provider data never
    reaches the caller.

    Raises:
        ClientDisconnected: If the caller went away first
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
                raise ClientDisconnected()
    finally:
        if not task.done():
            # Outer request cancelled: the provider call must not outlive it
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
