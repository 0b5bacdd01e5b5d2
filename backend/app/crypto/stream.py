"""SSE streaming endpoint for live crypto snapshots."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from .broadcaster import BroadcastScheduler

logger = logging.getLogger(__name__)


def create_stream_router(scheduler: BroadcastScheduler) -> APIRouter:
    """Create the SSE streaming router bound to a broadcast scheduler.

    This factory pattern lets us inject the scheduler without globals.
    """
    router = APIRouter(prefix="/api/stream", tags=["streaming"])

    @router.get("/crypto")
    async def stream_crypto(request: Request) -> StreamingResponse:
        """SSE endpoint for live crypto snapshots.

        Every connected client counts as one subscriber. While at least one
        is connected, the scheduler pushes all three pairs once per second:

            event: crypto-data
            data: [{"symbol": "ETH/USDC", "price": 2500.5, "average": ..., "timestamp": ...}, ...]
        """
        return StreamingResponse(
            _generate_events(scheduler, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


async def _generate_events(
    scheduler: BroadcastScheduler,
    request: Request,
    poll_timeout: float = 1.0,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted broadcast messages.

    Registers with the scheduler on first iteration and always unregisters
    on the way out, however the stream ends. Wakes up at least every
    `poll_timeout` seconds to notice a disconnected client.
    """
    # Tell the client to retry after 1 second if the connection drops
    yield "retry: 1000\n\n"

    client_id = uuid.uuid4().hex
    client_ip = request.client.host if request.client else "unknown"
    mailbox = scheduler.on_connect(client_id)
    logger.info("SSE client connected: %s (%s)", client_ip, client_id)

    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break

            try:
                message = await asyncio.wait_for(mailbox.get(), timeout=poll_timeout)
            except asyncio.TimeoutError:
                continue

            payload = json.dumps(message.payload())
            yield f"event: {message.event}\ndata: {payload}\n\n"
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
    finally:
        scheduler.on_disconnect(client_id)
