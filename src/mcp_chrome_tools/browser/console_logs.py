"""Console message formatting and the per-tab console log registry."""

import json
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from ..constants import DEFAULT_CONSOLE_BUFFER_SIZE
from ..models import ConsoleLogEntry

import logging
logger = logging.getLogger(__name__)


def _format_arg(arg: Dict[str, Any]) -> str:
    if arg.get("value") is not None:
        value = arg["value"]
        return value if isinstance(value, str) else json.dumps(value)
    return arg.get("description") or arg.get("type", "")


def format_console_message(params: Dict[str, Any]) -> str:
    """Join the arguments of a Runtime.consoleAPICalled event into one line of text."""
    return " ".join(_format_arg(arg) for arg in params.get("args") or [])


def format_console_line(params: Dict[str, Any]) -> str:
    """e.g. "[log] clicked 3 times" """
    return f"[{params.get('type', 'log')}] {format_console_message(params)}"


class ConsoleLogRegistry:
    """
    Console messages per tab, filled by the listeners `load_url` leaves attached.

    Each tab keeps at most `capacity` entries; the oldest are evicted first.
    The registry also owns the DevTools sessions feeding it: at most one per
    tab, replaced on the next navigation and closed by `close_all()`.

    Not thread-safe; all access happens on the server's event loop.
    """

    def __init__(self, capacity: int = DEFAULT_CONSOLE_BUFFER_SIZE):
        self.capacity = capacity
        self._logs: Dict[str, Deque[ConsoleLogEntry]] = {}
        self._sessions: Dict[str, Any] = {}

    def reset(self, tab_id: str) -> None:
        self._logs[tab_id] = deque(maxlen=self.capacity)

    def append(self, tab_id: str, entry: ConsoleLogEntry) -> None:
        if tab_id not in self._logs:
            self.reset(tab_id)
        self._logs[tab_id].append(entry)

    def record(self, tab_id: str, params: Dict[str, Any]) -> None:
        """Runtime.consoleAPICalled listener body."""
        entry = ConsoleLogEntry(
            type=params.get("type", "log"),
            message=format_console_message(params),
            timestamp=params.get("timestamp") or time.time() * 1000,
        )
        self.append(tab_id, entry)
        logger.debug("Chrome Console [%s] (Tab %s): %s", entry.type, tab_id, entry.message)

    def listener_for(self, tab_id: str):
        return lambda params: self.record(tab_id, params)

    def get(self, tab_id: str, log_type: Optional[str] = None, since: Optional[float] = None) -> List[ConsoleLogEntry]:
        logs = self._logs.get(tab_id) or ()
        return [
            entry for entry in logs
            if (log_type is None or entry.type == log_type)
            and (since is None or entry.timestamp >= since)
        ]

    def tab_ids(self) -> List[str]:
        return list(self._logs)

    async def detach(self, tab_id: str) -> None:
        """Close the session listening on `tab_id`, if any, so it stops recording."""
        session = self._sessions.pop(tab_id, None)
        if session is not None:
            await session.close()

    async def attach(self, tab_id: str, session) -> None:
        """Take ownership of the session listening on `tab_id`, closing any previous one."""
        previous = self._sessions.pop(tab_id, None)
        self._sessions[tab_id] = session
        if previous is not None and previous is not session:
            await previous.close()

    def session_for(self, tab_id: str):
        return self._sessions.get(tab_id)

    async def close_all(self) -> None:
        sessions, self._sessions = list(self._sessions.values()), {}
        for session in sessions:
            await session.close()


__all__ = [
    "format_console_message",
    "format_console_line",
    "ConsoleLogRegistry",
]
