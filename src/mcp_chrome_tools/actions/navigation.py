"""Navigation with a persistent console listener."""

from ..context import ToolsContext
from ..exceptions import CDPTimeoutError, NavigationError

import logging
logger = logging.getLogger(__name__)


async def load_url(ctx: ToolsContext, tab_id: str, url: str) -> None:
    """
    Navigate the tab to `url` and wait for the load event.

    The tab's console buffer is cleared and a console listener is attached
    that keeps recording after this call returns. The session carrying that
    listener is handed to the console log registry instead of being closed;
    the one left by a previous navigation of the same tab is closed before
    the buffer is cleared. On failure the session is closed and nothing is
    handed over.

    Raises:
        NavigationError: Chrome reported an error for the navigation (DNS, refused, ...)
        CDPTimeoutError: the load event did not fire within the command timeout
    """
    logger.info("Attempting to load URL %s in tab %s", url, tab_id)
    session = await ctx.connect(tab_id)
    try:
        await session.send("Runtime.enable")
        await ctx.console_logs.detach(tab_id)
        ctx.console_logs.reset(tab_id)
        session.on("Runtime.consoleAPICalled", ctx.console_logs.listener_for(tab_id))

        await session.send("Page.enable")
        load_fired = session.subscribe("Page.loadEventFired")
        try:
            result = await session.send("Page.navigate", {"url": url})
            if result.get("errorText"):
                raise NavigationError(f"Navigation to {url} failed: {result['errorText']}")
            if await load_fired.get(timeout=session.command_timeout) is None:
                raise CDPTimeoutError(f"Timed out waiting for {url} to load")
        finally:
            session.unsubscribe(load_fired)
    except BaseException:
        await session.close()
        raise

    await ctx.console_logs.attach(tab_id, session)
    logger.info("URL loading successful")


__all__ = ["load_url"]
