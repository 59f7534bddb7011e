"""Streaming Transport Adapter: turns one open session into an SSE byte stream.

Invariants:
    - First frame is the endpoint event telling the client where to POST messages
    - A heartbeat comment is written on a fixed keepalive schedule, whether or
      not events were forwarded in between
    - Stream end (client disconnect, channel closed, shutdown) always reaches
      gateway.close_session() exactly through the finally block

Design Decisions:
    - Async generator consumed by StreamingResponse, so tests can drive it
      directly without a network socket
    - Heartbeats are SSE comments (": ..."): ignored by EventSource clients,
      enough to keep proxies from idling the connection out
"""

import asyncio
import json
import logging
import time
from typing import Any, AsyncIterator

from toolbox_gateway.core.session_registry import Session
from toolbox_gateway.services.gateway import Gateway

logger = logging.getLogger(__name__)

# SSE headers prevent proxy/browser buffering of streamed events.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def sse_event(event: str, data: Any) -> str:
    """Format a named SSE event; non-string data is sent as JSON."""
    if not isinstance(data, str):
        data = json.dumps(data, ensure_ascii=False)
    return f"event: {event}\ndata: {data}\n\n"


def sse_comment(text: str) -> str:
    return f": {text}\n\n"


def endpoint_url(messages_path: str, session_id: str) -> str:
    return f"{messages_path}?sessionId={session_id}"


async def stream_session(
    gateway: Gateway, session: Session, keepalive_seconds: float | None = None,
) -> AsyncIterator[str]:
    interval = keepalive_seconds or gateway.settings.keepalive_interval_seconds
    channel = session.channel
    try:
        yield sse_event("endpoint", endpoint_url(gateway.settings.messages_path, session.id))
        yield sse_comment(f"connected {_now_ms()}")
        loop = asyncio.get_running_loop()
        next_beat = loop.time() + interval
        while True:
            message = await channel.receive(max(next_beat - loop.time(), 0))
            if message is not None:
                yield sse_event(message["event"], message.get("data", ""))
            elif channel.closed:
                logger.info("Channel closed, ending stream (session=%s)", session.id)
                return
            if loop.time() >= next_beat:
                yield sse_comment(f"hb {_now_ms()}")
                next_beat = max(next_beat + interval, loop.time())
    except asyncio.CancelledError:
        logger.info("Client disconnected from stream (session=%s)", session.id)
        return
    finally:
        gateway.close_session(session.id)
