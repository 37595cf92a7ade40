"""Network capture tool implementation."""

import json
from typing import List, Optional

from ..context import get_context
from ..actions import network
from ..models import NetworkFilters


async def capture_network_events(
    tab_id: str,
    duration: Optional[float] = None,
    types: Optional[List[str]] = None,
    url_pattern: Optional[str] = None,
) -> str:
    """JSON array of the XHR/fetch exchanges completed during the capture window."""
    filters = NetworkFilters(types=types, url_pattern=url_pattern)
    events = await network.capture_network_events(get_context(), tab_id, duration=duration, filters=filters)
    return json.dumps([event.to_dict() for event in events], indent=2)


__all__ = ['capture_network_events']
