"""Diagnostics and debugging information utility functions."""

import sys
import platform
from importlib import metadata
from typing import Optional

from ..context import ToolsContext


def _version(distribution: str) -> str:
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return "?"


def collect_diagnostics(
    ctx: ToolsContext,
    exc: Optional[Exception] = None,
    available: Optional[bool] = None,
) -> str:
    """
    Collect diagnostic information about the endpoint, the libraries and the environment.

    Args:
        ctx: Context whose configuration and console buffers are reported
        exc: Exception that occurred (can be None)
        available: Result of an availability probe, if one was made

    Returns:
        str: Formatted diagnostic information
    """
    config = ctx.config
    parts = [
        f"OS                : {platform.system()} {platform.release()}",
        f"Python            : {sys.version.split()[0]}",
        f"mcp               : {_version('mcp')}",
        f"websockets        : {_version('websockets')}",
        f"Pillow            : {_version('Pillow')}",
        f"Debug URL         : {config.debug_url}",
        f"Connection type   : {config.connection_type}",
        f"Endpoint reachable: {'<not checked>' if available is None else available}",
        f"Buffered tabs     : {len(ctx.console_logs.tab_ids())}",
    ]

    if exc:
        parts += [
            "---- ERROR ----",
            f"Error type        : {type(exc).__name__}",
            f"Error message     : {exc}",
        ]

    return "\n".join(parts)


__all__ = ['collect_diagnostics']
