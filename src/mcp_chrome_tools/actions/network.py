"""Network traffic capture over a fixed window."""

import re
import asyncio
from typing import Any, Dict, List, Optional

from ..context import ToolsContext
from ..constants import (
    NETWORK_CAPTURE_DEFAULT_SECS,
    NETWORK_CAPTURE_MIN_SECS,
    NETWORK_CAPTURE_MAX_SECS,
)
from ..models import NetworkEvent, NetworkFilters, RequestType

import logging
logger = logging.getLogger(__name__)


REQUEST_WILL_BE_SENT = "Network.requestWillBeSent"
RESPONSE_RECEIVED = "Network.responseReceived"


def clamp_duration(duration: Optional[float]) -> float:
    if duration is None:
        return NETWORK_CAPTURE_DEFAULT_SECS
    return min(max(duration, NETWORK_CAPTURE_MIN_SECS), NETWORK_CAPTURE_MAX_SECS)


class NetworkCapture:
    """
    Pairs requestWillBeSent/responseReceived events by requestId.

    Requests that fail the filters are dropped on arrival and never stored.
    A record is emitted once, when its response arrives.
    """

    def __init__(self, filters: Optional[NetworkFilters] = None):
        filters = filters or NetworkFilters()
        self.types = set(filters.types) if filters.types is not None else None
        self.url_regex = re.compile(filters.url_pattern) if filters.url_pattern else None
        self.pending: Dict[str, NetworkEvent] = {}
        self.events: List[NetworkEvent] = []

    def matches(self, event: NetworkEvent) -> bool:
        if self.types is not None and event.type not in self.types:
            return False
        if self.url_regex is not None and not self.url_regex.search(event.url):
            return False
        return True

    def on_request(self, params: Dict[str, Any]) -> None:
        request = params.get("request") or {}
        event = NetworkEvent(
            type=RequestType.classify(params.get("type")),
            method=request.get("method", ""),
            url=request.get("url", ""),
            request_headers=request.get("headers") or {},
            request_time=params.get("timestamp"),
        )
        if self.matches(event):
            self.pending[params.get("requestId")] = event

    def on_response(self, params: Dict[str, Any]) -> None:
        event = self.pending.pop(params.get("requestId"), None)
        if event is None:
            return
        event.complete(params.get("response") or {}, params.get("timestamp"))
        self.events.append(event)

    def handle(self, method: str, params: Dict[str, Any]) -> None:
        if method == REQUEST_WILL_BE_SENT:
            self.on_request(params)
        elif method == RESPONSE_RECEIVED:
            self.on_response(params)


async def capture_network_events(
    ctx: ToolsContext,
    tab_id: str,
    duration: Optional[float] = None,
    filters: Optional[NetworkFilters] = None,
) -> List[NetworkEvent]:
    """
    Collect completed XHR/fetch exchanges for `duration` seconds (1-60, default 10).

    The window is fixed: collection stops at the deadline no matter how
    much traffic is still in flight. Requests still waiting for their
    response at that point are not reported.

    Raises:
        re.error: `filters.url_pattern` is not a valid regular expression
    """
    window = clamp_duration(duration)
    capture = NetworkCapture(filters)

    logger.info("Attempting to capture network events from tab %s for %ss", tab_id, window)
    async with ctx.open_session(tab_id) as session:
        channel = session.subscribe(REQUEST_WILL_BE_SENT, RESPONSE_RECEIVED)
        await session.send("Network.enable")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + window
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            item = await channel.get(timeout=remaining)
            if item is not None:
                capture.handle(*item)

        if channel.dropped:
            logger.warning("Dropped %d network events on tab %s", channel.dropped, tab_id)

    logger.info("Network event capture successful, captured %d events", len(capture.events))
    return capture.events


__all__ = [
    "clamp_duration",
    "NetworkCapture",
    "capture_network_events",
]
