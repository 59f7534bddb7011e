"""Session Channel: bounded, close-aware push queue."""

from toolbox_gateway.infrastructure.session_channel import SessionChannel


async def test_send_then_receive():
    channel = SessionChannel()
    assert channel.send({"event": "message", "data": 1})
    assert await channel.receive(timeout=1) == {"event": "message", "data": 1}


async def test_receive_times_out_with_none():
    assert await SessionChannel().receive(timeout=0.01) is None


async def test_close_wakes_reader_and_rejects_sends():
    channel = SessionChannel()
    channel.close()
    channel.close()
    assert channel.closed
    assert await channel.receive(timeout=1) is None
    assert channel.send({"event": "late"}) is False


async def test_full_backlog_drops_events():
    channel = SessionChannel(max_pending=2)
    assert channel.send({"event": "a"})
    assert channel.send({"event": "b"})
    assert channel.send({"event": "c"}) is False
    channel.close()
    assert (await channel.receive(timeout=1))["event"] == "a"
