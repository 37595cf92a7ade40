"""Tests for the websocket session against a local DevTools-like server."""

import json
import asyncio

import pytest
from websockets.asyncio.server import serve

from mcp_chrome_tools.browser.cdp import CDPSession, EventChannel, _websocket_url_for
from mcp_chrome_tools.exceptions import CDPProtocolError, CDPTimeoutError, ChromeConnectionError


async def devtools_handler(ws):
    async for raw in ws:
        msg = json.loads(raw)
        method = msg["method"]
        if method == "Test.fail":
            await ws.send(json.dumps({"id": msg["id"], "error": {"code": -32601, "message": "'Test.fail' wasn't found"}}))
        elif method == "Test.hang":
            continue
        elif method == "Test.emit":
            await ws.send(json.dumps({"method": "Test.event", "params": {"n": 1}}))
            await ws.send(json.dumps({"id": msg["id"], "result": {}}))
        elif method == "Test.disconnect":
            await ws.close()
            return
        else:
            await ws.send(json.dumps({"id": msg["id"], "result": {"echo": msg["params"]}}))


def run_with_server(event_loop, scenario):
    async def main():
        async with serve(devtools_handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            session = CDPSession(f"ws://127.0.0.1:{port}/devtools/page/T1", target_id="T1", command_timeout=2.0)
            await session.connect()
            try:
                await scenario(session)
            finally:
                await session.close()
            return session

    return event_loop.run_until_complete(main())


class TestCDPSession:

    def test_command_reply(self, event_loop):
        async def scenario(session):
            assert await session.send("Runtime.evaluate", {"expression": "1+1"}) == {"echo": {"expression": "1+1"}}
            assert await session.send("Page.enable") == {"echo": {}}

        run_with_server(event_loop, scenario)

    def test_concurrent_commands_are_matched_by_id(self, event_loop):
        async def scenario(session):
            results = await asyncio.gather(*(session.send("Echo", {"i": i}) for i in range(5)))
            assert [r["echo"]["i"] for r in results] == list(range(5))

        run_with_server(event_loop, scenario)

    def test_error_reply(self, event_loop):
        async def scenario(session):
            with pytest.raises(CDPProtocolError) as excinfo:
                await session.send("Test.fail")
            assert excinfo.value.code == -32601
            assert str(excinfo.value).startswith("Test.fail failed:")

        run_with_server(event_loop, scenario)

    def test_timeout(self, event_loop):
        async def scenario(session):
            with pytest.raises(CDPTimeoutError):
                await session.send("Test.hang", timeout=0.1)
            # Session stays usable
            assert await session.send("Echo") == {"echo": {}}

        run_with_server(event_loop, scenario)

    def test_events_reach_channels_and_listeners(self, event_loop):
        seen = []

        async def scenario(session):
            channel = session.subscribe("Test.event")
            other = session.subscribe("Other.event")
            session.on("Test.event", seen.append)

            await session.send("Test.emit")

            assert await channel.get(timeout=1.0) == ("Test.event", {"n": 1})
            assert other.get_nowait() is None

        run_with_server(event_loop, scenario)
        assert seen == [{"n": 1}]

    def test_remote_close_fails_commands(self, event_loop):
        async def scenario(session):
            with pytest.raises(ChromeConnectionError):
                await session.send("Test.disconnect")
            with pytest.raises(ChromeConnectionError):
                await session.send("Echo")

        session = run_with_server(event_loop, scenario)
        assert session.closed

    def test_send_after_close(self, event_loop):
        async def scenario(session):
            await session.close()
            with pytest.raises(ChromeConnectionError):
                await session.send("Echo")

        run_with_server(event_loop, scenario)

    def test_connect_refused(self, event_loop):
        session = CDPSession("ws://127.0.0.1:1/devtools/page/T1", target_id="T1")
        with pytest.raises(ChromeConnectionError):
            event_loop.run_until_complete(session.connect())


class TestEventChannel:

    def test_drops_when_full(self, event_loop):
        async def scenario():
            channel = EventChannel(["E"], capacity=2)
            for i in range(4):
                channel.put("E", {"i": i})
            assert channel.dropped == 2
            assert [params["i"] for _, params in channel.drain()] == [0, 1]

        event_loop.run_until_complete(scenario())

    def test_get_times_out(self, event_loop):
        async def scenario():
            channel = EventChannel(["E"])
            assert await channel.get(timeout=0.05) is None
            assert await channel.get(timeout=0) is None

        event_loop.run_until_complete(scenario())


class TestWebsocketUrl:

    TARGETS = [
        {"id": "A1", "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/A1"},
        {"id": "B2"},
    ]

    def test_reported_url(self):
        assert _websocket_url_for(self.TARGETS, "A1", "localhost", 9222) == "ws://localhost:9222/devtools/page/A1"

    def test_fallback_url(self):
        assert _websocket_url_for(self.TARGETS, "B2", "127.0.0.1", 9333) == "ws://127.0.0.1:9333/devtools/page/B2"

    def test_unknown_tab(self):
        with pytest.raises(ChromeConnectionError, match="C3"):
            _websocket_url_for(self.TARGETS, "C3", "localhost", 9222)
