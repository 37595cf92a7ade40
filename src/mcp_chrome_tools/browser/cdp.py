"""
mcp_chrome_tools/browser/cdp.py

DevTools Protocol transport: HTTP target listing and one websocket session per tab.
"""

import json
import asyncio
import itertools
import contextlib
import urllib.error
import urllib.request
from typing import Any, Callable, Dict, List, Optional, Tuple

from websockets.asyncio.client import connect, ClientConnection
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..config import ChromeToolsConfig
from ..constants import EVENT_CHANNEL_CAPACITY, HTTP_TIMEOUT_SECS
from ..exceptions import ChromeConnectionError, CDPProtocolError, CDPTimeoutError

import logging
logger = logging.getLogger(__name__)


EventListener = Callable[[Dict[str, Any]], None]


def list_targets(host: str, port: int, timeout: float = HTTP_TIMEOUT_SECS) -> List[Dict[str, Any]]:
    """Fetch the DevTools target list (tabs, workers, extensions) over HTTP."""
    with urllib.request.urlopen(f"http://{host}:{port}/json/list", timeout=timeout) as resp:
        return json.load(resp)


async def fetch_targets(host: str, port: int, timeout: float = HTTP_TIMEOUT_SECS) -> List[Dict[str, Any]]:
    """Non-blocking wrapper around list_targets."""
    return await asyncio.to_thread(list_targets, host, port, timeout)


def _websocket_url_for(targets: List[Dict[str, Any]], target_id: str, host: str, port: int) -> str:
    for target in targets:
        if target.get("id") != target_id:
            continue
        # Chrome omits the URL while another client (e.g. DevTools UI) holds the page
        return target.get("webSocketDebuggerUrl") or f"ws://{host}:{port}/devtools/page/{target_id}"
    raise ChromeConnectionError(f"No tab with id {target_id!r} found at http://{host}:{port}")


class EventChannel:
    """
    Bounded queue of events for one subscriber.

    The session's reader task is the producer; the operation that subscribed
    consumes with `get(timeout)` or `drain()`. When the queue is full, new
    events are dropped and counted.
    """

    def __init__(self, methods, capacity: int = EVENT_CHANNEL_CAPACITY):
        self.methods = frozenset(methods)
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self.dropped = 0

    def accepts(self, method: str) -> bool:
        return method in self.methods

    def put(self, method: str, params: Dict[str, Any]) -> None:
        try:
            self._queue.put_nowait((method, params))
        except asyncio.QueueFull:
            self.dropped += 1
            if self.dropped == 1:
                logger.warning("Event channel full, dropping %s events", ", ".join(sorted(self.methods)))

    async def get(self, timeout: Optional[float] = None):
        """Next (method, params) pair, or None once `timeout` seconds pass without one."""
        if timeout is not None and timeout <= 0:
            return self.get_nowait()
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None

    def get_nowait(self):
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def drain(self) -> list:
        items = []
        while True:
            item = self.get_nowait()
            if item is None:
                return items
            items.append(item)


class CDPSession:
    """
    One websocket connection to one tab.

    Commands are matched to replies by id. Events are delivered to
    subscribed EventChannels and to plain listeners registered with
    `on()`; both run on the reader task, so listeners must not block.
    """

    # Magic methods ________________________________________________________________________________________________________

    def __init__(self, ws_url: str, target_id: str, command_timeout: float = 30.0) -> None:
        self.ws_url = ws_url
        self.target_id = target_id
        self.command_timeout = command_timeout
        self.ws: Optional[ClientConnection] = None
        self._ids = itertools.count(1)
        self._pending: Dict[int, Tuple[str, asyncio.Future]] = {}
        self._channels: List[EventChannel] = []
        self._listeners: Dict[str, List[EventListener]] = {}
        self._reader: Optional[asyncio.Task] = None
        self._closed = False

    def __repr__(self) -> str:
        return f"CDPSession(target_id={self.target_id!r}, closed={self.closed})"

    # Private methods ______________________________________________________________________________________________________

    def _dispatch_event(self, method: str, params: Dict[str, Any]) -> None:
        for channel in list(self._channels):
            if channel.accepts(method):
                channel.put(method, params)
        for listener in list(self._listeners.get(method, ())):
            try:
                listener(params)
            except Exception:
                logger.exception("Listener for %s on tab %s failed", method, self.target_id)

    def _handle_reply(self, msg: Dict[str, Any]) -> None:
        method, future = self._pending.pop(msg["id"], (None, None))
        if future is None or future.done():
            return
        if "error" in msg:
            err = msg["error"] or {}
            future.set_exception(CDPProtocolError(
                method=method,
                code=err.get("code"),
                message=err.get("message", "unknown error"),
                data=err.get("data"),
            ))
        else:
            future.set_result(msg.get("result") or {})

    def _fail_pending(self, exc: Exception) -> None:
        for _, future in self._pending.values():
            if not future.done():
                future.set_exception(exc)
        self._pending.clear()

    async def _receive(self) -> None:
        try:
            async for raw in self.ws:
                try:
                    msg = json.loads(raw)
                except ValueError:
                    logger.warning("Ignoring non-JSON frame from tab %s", self.target_id)
                    continue
                if "id" in msg:
                    self._handle_reply(msg)
                elif "method" in msg:
                    self._dispatch_event(msg["method"], msg.get("params") or {})
        except ConnectionClosed as e:
            logger.info("DevTools connection to tab %s closed: %s", self.target_id, e)
        finally:
            self._closed = True
            self._fail_pending(ChromeConnectionError(f"Connection to tab {self.target_id} was closed"))

    # Public methods _______________________________________________________________________________________________________

    @property
    def closed(self) -> bool:
        return self._closed

    async def connect(self) -> "CDPSession":
        try:
            self.ws = await connect(self.ws_url, max_size=None)
        except (OSError, WebSocketException) as e:
            raise ChromeConnectionError(f"Failed to open DevTools session for tab {self.target_id}: {e}") from e
        self._reader = asyncio.create_task(self._receive())
        logger.debug("Connected to %s", self.ws_url)
        return self

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None,
                   timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Send a command and wait for its result.

        Raises:
            CDPProtocolError: Chrome answered with an error object
            CDPTimeoutError: no reply within the timeout
            ChromeConnectionError: the session is closed
        """
        if self.ws is None or self._closed:
            raise ChromeConnectionError(f"Session for tab {self.target_id} is not open")

        cmd_id = next(self._ids)
        future = asyncio.get_running_loop().create_future()
        self._pending[cmd_id] = (method, future)

        try:
            await self.ws.send(json.dumps({"id": cmd_id, "method": method, "params": params or {}}))
            return await asyncio.wait_for(future, timeout=timeout or self.command_timeout)
        except asyncio.TimeoutError:
            raise CDPTimeoutError(f"{method} timed out after {timeout or self.command_timeout} seconds")
        except ConnectionClosed as e:
            raise ChromeConnectionError(f"Connection to tab {self.target_id} was closed: {e}") from e
        finally:
            self._pending.pop(cmd_id, None)

    def subscribe(self, *methods: str, capacity: int = EVENT_CHANNEL_CAPACITY) -> EventChannel:
        channel = EventChannel(methods, capacity=capacity)
        self._channels.append(channel)
        return channel

    def unsubscribe(self, channel: EventChannel) -> None:
        with contextlib.suppress(ValueError):
            self._channels.remove(channel)

    def on(self, method: str, listener: EventListener) -> None:
        """Register a callback for every `method` event for the life of the session."""
        self._listeners.setdefault(method, []).append(listener)

    async def wait_for_event(self, method: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        channel = self.subscribe(method)
        try:
            item = await channel.get(timeout=timeout or self.command_timeout)
        finally:
            self.unsubscribe(channel)
        if item is None:
            raise CDPTimeoutError(f"Timed out waiting for {method}")
        return item[1]

    async def close(self) -> None:
        if self.ws is not None:
            await self.ws.close()
        if self._reader is not None:
            await asyncio.gather(self._reader, return_exceptions=True)
        self._closed = True
        logger.debug("Closed session for tab %s", self.target_id)


async def connect_session(config: ChromeToolsConfig, target_id: str) -> CDPSession:
    """Resolve the tab's websocket URL and connect. The caller owns the session."""
    try:
        targets = await fetch_targets(config.host, config.port)
    except (urllib.error.URLError, OSError, ValueError) as e:
        raise ChromeConnectionError(f"Failed to connect to Chrome DevTools. {config.error_help}") from e

    ws_url = _websocket_url_for(targets, target_id, config.host, config.port)
    session = CDPSession(ws_url=ws_url, target_id=target_id, command_timeout=config.command_timeout)
    return await session.connect()


@contextlib.asynccontextmanager
async def open_session(config: ChromeToolsConfig, target_id: str):
    """
    Open a session for one operation; closed on every exit path.

        async with open_session(config, tab_id) as session:
            await session.send("Runtime.enable")
    """
    session = await connect_session(config, target_id)
    try:
        yield session
    finally:
        await session.close()


__all__ = [
    "list_targets",
    "fetch_targets",
    "EventChannel",
    "CDPSession",
    "connect_session",
    "open_session",
]
