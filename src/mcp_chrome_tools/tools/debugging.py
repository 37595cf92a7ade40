"""Debugging and diagnostic tool implementations."""

import json

from .. import __version__
from ..context import get_context
from ..actions.tabs import is_available
from ..utils.diagnostics import collect_diagnostics


async def get_debug_diagnostics_info() -> str:
    """Report configuration, library versions and whether the endpoint answers."""
    ctx = get_context()
    available = await is_available(ctx)

    return json.dumps({
        "ok": True,
        "version": __version__,
        "diagnostics": {
            "summary": collect_diagnostics(ctx, available=available),
            "debug_url": ctx.config.debug_url,
            "connection_type": ctx.config.connection_type,
            "available": available,
            "console_buffers": {
                tab_id: len(ctx.console_logs.get(tab_id)) for tab_id in ctx.console_logs.tab_ids()
            },
        },
    }, indent=2)


__all__ = ['get_debug_diagnostics_info']
