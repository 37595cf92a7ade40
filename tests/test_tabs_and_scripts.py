"""Tests for tab listing and script execution."""

import json
import urllib.error

import pytest

from mcp_chrome_tools.actions import list_tabs, is_available, execute_script
from mcp_chrome_tools.exceptions import CDPProtocolError, ChromeConnectionError

from _utils import FakeSession, make_context, console_event


TABS = [
    {"id": "A1", "title": "Example", "url": "https://example.com/", "type": "page",
     "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/A1"},
    {"id": "B2", "title": "Docs", "url": "https://docs.example.com/", "type": "page",
     "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/B2"},
]


class TestListTabs:

    def test_returns_targets_verbatim(self, event_loop):
        ctx = make_context(targets=TABS)
        assert event_loop.run_until_complete(list_tabs(ctx)) == TABS

    def test_listing_twice_yields_same_ids(self, event_loop):
        ctx = make_context(targets=TABS)
        first = event_loop.run_until_complete(list_tabs(ctx))
        second = event_loop.run_until_complete(list_tabs(ctx))
        assert {t["id"] for t in first} == {t["id"] for t in second}

    def test_unreachable_endpoint_uses_configured_help(self, event_loop):
        ctx = make_context(
            targets_error=urllib.error.URLError("Connection refused"),
            error_help="Make sure the SSH tunnel is running.",
        )
        with pytest.raises(ChromeConnectionError) as exc:
            event_loop.run_until_complete(list_tabs(ctx))
        assert str(exc.value) == "Failed to connect to Chrome DevTools. Make sure the SSH tunnel is running."

    def test_default_help_mentions_remote_debugging(self, event_loop):
        ctx = make_context(targets_error=ConnectionRefusedError())
        with pytest.raises(ChromeConnectionError, match="--remote-debugging-port=9222"):
            event_loop.run_until_complete(list_tabs(ctx))

    def test_is_available(self, event_loop):
        assert event_loop.run_until_complete(is_available(make_context(targets=TABS))) is True
        down = make_context(targets_error=OSError("down"))
        assert event_loop.run_until_complete(is_available(down)) is False


class TestExecuteScript:

    def test_returns_result_and_console_output(self, event_loop):
        def evaluate(session, params):
            session.emit("Runtime.consoleAPICalled", console_event("hello"))
            session.emit("Runtime.consoleAPICalled", {
                "type": "warning",
                "args": [{"type": "number", "value": 42}, {"type": "object", "description": "Object"}],
            })
            return {"result": {"type": "number", "value": 3, "description": "3"}}

        session = FakeSession(replies={"Runtime.evaluate": evaluate})
        ctx = make_context([session])

        result = event_loop.run_until_complete(execute_script(ctx, "A1", "console.log('hello'); 1 + 2"))

        assert result.to_dict() == {
            "result": {"type": "number", "value": 3, "description": "3"},
            "consoleOutput": ["[log] hello", "[warning] 42 Object"],
        }
        assert session.methods() == ["Runtime.enable", "Runtime.evaluate"]
        assert session.params_of("Runtime.evaluate")[0] == {
            "expression": "console.log('hello'); 1 + 2",
            "returnByValue": True,
            "includeCommandLineAPI": True,
        }
        assert session.close_calls == 1

    def test_console_is_per_call(self, event_loop):
        def evaluate(session, params):
            session.emit("Runtime.consoleAPICalled", console_event(params["expression"]))
            return {"result": {"type": "undefined"}}

        ctx = make_context([FakeSession(replies={"Runtime.evaluate": evaluate}) for _ in range(2)])
        first = event_loop.run_until_complete(execute_script(ctx, "A1", "one"))
        second = event_loop.run_until_complete(execute_script(ctx, "A1", "two"))
        assert first.console_output == ["[log] one"]
        assert second.console_output == ["[log] two"]

    def test_protocol_error_propagates_and_closes_session(self, event_loop):
        error = CDPProtocolError("Runtime.evaluate", -32000, "Execution context was destroyed.")
        session = FakeSession(replies={"Runtime.evaluate": error})
        ctx = make_context([session])

        with pytest.raises(CDPProtocolError, match="Execution context was destroyed"):
            event_loop.run_until_complete(execute_script(ctx, "A1", "location.reload()"))
        assert session.close_calls == 1

    def test_result_is_json_serialisable(self, event_loop):
        session = FakeSession(replies={"Runtime.evaluate": {"result": {"type": "string", "value": "ok"}}})
        result = event_loop.run_until_complete(execute_script(make_context([session]), "A1", "'ok'"))
        assert json.loads(json.dumps(result.to_dict()))["result"]["value"] == "ok"
