"""Tests for load_url and the console listener it leaves behind."""

import pytest

from mcp_chrome_tools.actions import load_url
from mcp_chrome_tools.exceptions import CDPTimeoutError, ChromeConnectionError, NavigationError

from _utils import FakeSession, make_context, console_event


def loading_session(**replies):
    def navigate(session, params):
        session.emit("Page.loadEventFired", {"timestamp": 1.0})
        return {"frameId": "F1"}

    replies.setdefault("Page.navigate", navigate)
    return FakeSession(replies=replies)


class TestLoadUrl:

    def test_navigates_and_waits_for_load(self, event_loop):
        session = loading_session()
        ctx = make_context([session])

        event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com"))

        assert session.methods() == ["Runtime.enable", "Page.enable", "Page.navigate"]
        assert session.params_of("Page.navigate") == [{"url": "https://example.com"}]

    def test_session_stays_open_and_is_owned_by_registry(self, event_loop):
        session = loading_session()
        ctx = make_context([session])

        event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com"))

        assert session.close_calls == 0
        assert ctx.console_logs.session_for("A1") is session

    def test_console_messages_after_load_are_recorded(self, event_loop):
        session = loading_session()
        ctx = make_context([session])
        event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com"))

        session.emit("Runtime.consoleAPICalled", console_event("ready", timestamp=10.0))
        session.emit("Runtime.consoleAPICalled", console_event("boom", type="error", timestamp=20.0))

        logs = ctx.console_logs.get("A1")
        assert [(e.type, e.message) for e in logs] == [("log", "ready"), ("error", "boom")]

    def test_second_load_replaces_listener(self, event_loop):
        first, second = loading_session(), loading_session()
        ctx = make_context([first, second])

        event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com/one"))
        first.emit("Runtime.consoleAPICalled", console_event("from one"))
        event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com/two"))

        assert first.close_calls == 1
        assert second.close_calls == 0
        assert ctx.console_logs.session_for("A1") is second
        # Buffer is cleared on every navigation
        assert ctx.console_logs.get("A1") == []

    def test_console_during_second_load_is_recorded_once(self, event_loop):
        first = loading_session()

        def navigate(session, params):
            # The page logs while loading; every open client on the tab receives it
            first.emit("Runtime.consoleAPICalled", console_event("booting"))
            session.emit("Runtime.consoleAPICalled", console_event("booting"))
            session.emit("Page.loadEventFired", {})
            return {"frameId": "F1"}

        second = FakeSession(replies={"Page.navigate": navigate})
        ctx = make_context([first, second])

        event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com/one"))
        event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com/two"))

        assert [e.message for e in ctx.console_logs.get("A1")] == ["booting"]
        assert first.close_calls == 1

    def test_navigation_error(self, event_loop):
        session = FakeSession(replies={"Page.navigate": {"frameId": "F1", "errorText": "net::ERR_NAME_NOT_RESOLVED"}})
        ctx = make_context([session])

        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
            event_loop.run_until_complete(load_url(ctx, "A1", "https://nope.invalid"))

        assert session.close_calls == 1
        assert ctx.console_logs.session_for("A1") is None

    def test_load_event_timeout(self, event_loop):
        session = FakeSession(replies={"Page.navigate": {"frameId": "F1"}}, command_timeout=0.05)
        ctx = make_context([session])

        with pytest.raises(CDPTimeoutError):
            event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com"))

        assert session.close_calls == 1

    def test_command_failure_closes_session(self, event_loop):
        session = FakeSession(replies={"Page.enable": ChromeConnectionError("gone")})
        ctx = make_context([session])

        with pytest.raises(ChromeConnectionError):
            event_loop.run_until_complete(load_url(ctx, "A1", "https://example.com"))

        assert session.close_calls == 1
        assert session.methods() == ["Runtime.enable", "Page.enable"]
