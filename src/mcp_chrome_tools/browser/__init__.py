"""DevTools transport and per-tab console state."""

from .cdp import (
    list_targets,
    fetch_targets,
    EventChannel,
    CDPSession,
    connect_session,
    open_session,
)

from .console_logs import (
    format_console_message,
    format_console_line,
    ConsoleLogRegistry,
)

__all__ = [
    "list_targets",
    "fetch_targets",
    "EventChannel",
    "CDPSession",
    "connect_session",
    "open_session",
    "format_console_message",
    "format_console_line",
    "ConsoleLogRegistry",
]
