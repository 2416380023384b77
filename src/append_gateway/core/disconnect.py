"""
Cancellation of in-flight provider calls when the caller hangs up.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

from append_gateway.core.exceptions import ClientDisconnectedError
from append_gateway.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from starlette.requests import Request

T = TypeVar("T")


async def wait_for_disconnect(request: Request) -> None:
    """Block until the ASGI server reports that the client went away."""
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


async def cancel_on_disconnect(request: Request, work: Awaitable[T]) -> T:
    """
    Run ``work`` unless the client disconnects first.

    Args:
        request: Inbound request whose connection is watched
        work: Awaitable producing the response payload

    Returns:
        Result of ``work``

    Raises:
        ClientDisconnectedError: The client disconnected; ``work`` was cancelled
    """
    work_task = asyncio.ensure_future(work)
    watcher = asyncio.ensure_future(wait_for_disconnect(request))

    try:
        done, _ = await asyncio.wait(
            {work_task, watcher},
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        # Outer cancellation must not leak either task
        for task in (work_task, watcher):
            if not task.done():
                task.cancel()

    if work_task in done:
        return work_task.result()

    get_logger().info(
        "Client disconnected, cancelled provider call",
        extra={"path": str(request.url.path)},
    )
    raise ClientDisconnectedError
