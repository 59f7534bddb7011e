"""Streaming Transport Adapter: stream frames and teardown on disconnect.

Tests drive the async generator directly; httpx's ASGITransport buffers the
whole response body and cannot observe an endless stream.
"""

import asyncio
import json

from toolbox_gateway.services.sse_transport import (
    endpoint_url,
    sse_comment,
    sse_event,
    stream_session,
)


def test_sse_event_formats_json_data():
    assert sse_event("message", {"a": 1}) == 'event: message\ndata: {"a": 1}\n\n'
    assert sse_event("endpoint", "/messages") == "event: endpoint\ndata: /messages\n\n"
    assert sse_comment("hb 1") == ": hb 1\n\n"


async def test_first_frames_are_endpoint_then_connected(gateway):
    session = gateway.open_session("10.0.0.1")
    stream = stream_session(gateway, session, keepalive_seconds=0.01)
    first = await stream.__anext__()
    second = await stream.__anext__()
    assert first == sse_event("endpoint", endpoint_url("/messages", session.id))
    assert second.startswith(": connected ")
    await stream.aclose()


async def test_quiet_channel_emits_heartbeat(gateway):
    session = gateway.open_session("10.0.0.1")
    stream = stream_session(gateway, session, keepalive_seconds=0.01)
    await stream.__anext__()
    await stream.__anext__()
    assert (await stream.__anext__()).startswith(": hb ")
    await stream.aclose()


async def test_channel_events_are_forwarded(gateway):
    session = gateway.open_session("10.0.0.1")
    stream = stream_session(gateway, session, keepalive_seconds=5)
    await stream.__anext__()
    await stream.__anext__()
    gateway.notify(session.id, "message", {"jsonrpc": "2.0", "method": "ping"})
    frame = await stream.__anext__()
    assert frame.startswith("event: message\n")
    assert json.loads(frame.split("data: ", 1)[1]) == {"jsonrpc": "2.0", "method": "ping"}
    await stream.aclose()


async def test_disconnect_tears_session_down(gateway):
    session = gateway.open_session("10.0.0.1")
    await gateway.dispatcher.dispatch(session.id, "test_tool", {"message": "hi"})
    stream = stream_session(gateway, session, keepalive_seconds=5)
    await stream.__anext__()
    await stream.aclose()
    assert gateway.resolve(session.id) is None
    assert not gateway.admission.invocations.has_state(session.id)


async def test_cancellation_tears_session_down(gateway):
    session = gateway.open_session("10.0.0.1")

    async def consume():
        async for _ in stream_session(gateway, session, keepalive_seconds=5):
            pass

    task = asyncio.create_task(consume())
    await asyncio.sleep(0.01)
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    assert gateway.resolve(session.id) is None


async def test_shutdown_ends_stream(gateway):
    session = gateway.open_session("10.0.0.1")
    stream = stream_session(gateway, session, keepalive_seconds=5)
    await stream.__anext__()
    await stream.__anext__()
    gateway.close_all()
    frames = [frame async for frame in stream]
    assert frames == [sse_event("shutdown", {"reason": "server shutting down"})]


async def test_heartbeat_keeps_schedule_while_events_flow(gateway):
    session = gateway.open_session("10.0.0.1")
    stream = stream_session(gateway, session, keepalive_seconds=0.05)
    await stream.__anext__()
    await stream.__anext__()

    async def chatter():
        for i in range(30):
            gateway.notify(session.id, "message", {"n": i})
            await asyncio.sleep(0.01)

    producer = asyncio.create_task(chatter())

    async def first_heartbeat():
        events = 0
        async for frame in stream:
            if frame.startswith(": hb "):
                return events
            events += 1

    events_before = await asyncio.wait_for(first_heartbeat(), timeout=1)
    assert events_before >= 1
    producer.cancel()
    await asyncio.gather(producer, return_exceptions=True)
    await stream.aclose()
