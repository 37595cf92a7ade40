"""Navigation and console log tool implementations."""

import json
from typing import Optional

from ..context import get_context
from ..actions import navigation


async def load_url(tab_id: str, url: str) -> str:
    await navigation.load_url(get_context(), tab_id, url)
    return f"Successfully loaded {url} in tab {tab_id}"


async def get_console_logs(tab_id: str, log_type: Optional[str] = None, since: Optional[float] = None) -> str:
    """
    Console messages recorded for a tab since its last `load_url`.

    Args:
        tab_id: Tab whose buffer to read
        log_type: Only entries of this console type (log, warning, error, ...)
        since: Only entries at or after this timestamp (ms since epoch)
    """
    entries = get_context().console_logs.get(tab_id, log_type=log_type, since=since)
    return json.dumps([entry.to_dict() for entry in entries], indent=2)


__all__ = ['load_url', 'get_console_logs']
