"""Tab discovery."""

import urllib.error
from typing import Any, Dict, List

from ..context import ToolsContext
from ..exceptions import ChromeConnectionError

import logging
logger = logging.getLogger(__name__)


async def list_tabs(ctx: ToolsContext) -> List[Dict[str, Any]]:
    """
    List every target the DevTools endpoint exposes, as Chrome reports it.

    Raises:
        ChromeConnectionError: the endpoint is unreachable; the message carries
            the configured recovery hint (start the SSH tunnel, enable remote debugging, ...)
    """
    logger.info("Attempting to list tabs on port %s", ctx.config.port)
    try:
        targets = await ctx.list_targets()
    except (urllib.error.URLError, OSError, ValueError) as e:
        logger.error("Failed to list tabs: %s", e)
        raise ChromeConnectionError(f"Failed to connect to Chrome DevTools. {ctx.config.error_help}") from e
    logger.info("Successfully found %d tabs", len(targets))
    return targets


async def is_available(ctx: ToolsContext) -> bool:
    """True when the endpoint answers the target listing."""
    try:
        await list_tabs(ctx)
    except Exception:
        return False
    return True


__all__ = ["list_tabs", "is_available"]
