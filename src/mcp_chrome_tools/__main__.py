#region Overview
"""
## What this server is

An MCP server for an agent that needs to look at and poke a Chrome that is
already running with `--remote-debugging-port`. It never starts or stops
Chrome. Point CHROME_DEBUG_URL at the debugging endpoint (directly, or at
the local end of an SSH tunnel) and call `list_tabs` to get tab ids.

## Sessions

Every tool call opens its own DevTools session against one tab and closes it
before returning. The exception is `load_url`: its console listener stays
attached so `get_console_logs` can report what the page logs afterwards.

## Screenshots

`capture_screenshot` re-encodes the capture to fit inside 900x600 and under
1 MiB (WebP, with PNG fallback), writes it to the screenshot directory and
returns the path. The data URL prefix / `format` field tells which encoding
was used.

## Clicking

`click_element` dispatches a synthetic MouseEvent from page script. Page
handlers run; browser default actions that need trusted input may not.
"""
#endregion

#region Imports
import sys
import contextlib
from typing import Annotated, List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from mcp.server.fastmcp import FastMCP
#endregion

#region Imports Dotenv
load_dotenv()
#endregion

#region Import from your package
from mcp_chrome_tools import __version__
from mcp_chrome_tools.config import log_file_path
from mcp_chrome_tools.context import get_context
from mcp_chrome_tools.decorators import tool_envelope
from mcp_chrome_tools.tools import tabs, screenshots, network, navigation, interaction, debugging
#endregion

#region Logger
import logging
logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # stdout carries the MCP stream
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file_path()),
            logging.StreamHandler(sys.stderr),
        ],
    )
#endregion

#region FastMCP Initialization
@contextlib.asynccontextmanager
async def _lifespan(_server: FastMCP):
    ctx = get_context()
    logger.info("ChromeAPI: Connecting to %s (%s connection)", ctx.config.debug_url, ctx.config.connection_type)
    try:
        yield {}
    finally:
        await ctx.console_logs.close_all()


mcp = FastMCP("chrome-tools", lifespan=_lifespan)
#endregion

#region Schemas
TabId = Annotated[str, Field(description="ID of the Chrome tab, as returned by list_tabs")]


class NetworkFiltersInput(BaseModel):
    types: Optional[List[Literal["fetch", "xhr"]]] = Field(
        default=None, description="Types of requests to capture")
    urlPattern: Optional[str] = Field(
        default=None, description="Only capture URLs matching this pattern (regular expression)")
#endregion

#region Tools -- Tabs and scripts
@mcp.tool(name="list_tabs")
@tool_envelope
async def list_tabs() -> str:
    """List all available Chrome tabs (id, title, url, type, webSocketDebuggerUrl)."""
    return await tabs.list_tabs()


@mcp.tool(name="execute_script")
@tool_envelope
async def execute_script(
    tabId: TabId,
    script: Annotated[str, Field(description="JavaScript code to execute in the tab")],
) -> str:
    """
    Execute JavaScript in a Chrome tab.

    Returns JSON {"result": ..., "consoleOutput": [...]} with the evaluation
    result (by value) and the console messages logged while it ran.
    """
    return await tabs.execute_script(tabId, script)
#endregion

#region Tools -- Screenshots
@mcp.tool(name="capture_screenshot")
@tool_envelope
async def capture_screenshot(
    tabId: Annotated[str, Field(description="ID of the Chrome tab to capture. Only send this unless you are having issues with the result.")],
    format: Annotated[Optional[Literal["jpeg", "png"]], Field(description="Initial capture format (jpeg/png). Note: Final output will be WebP with PNG fallback")] = None,
    quality: Annotated[Optional[Annotated[int, Field(ge=1, le=100)]], Field(description="Initial capture quality (1-100). Note: Final output uses WebP quality settings")] = None,
    fullPage: Annotated[Optional[bool], Field(description="Capture full scrollable page")] = None,
    includeData: Annotated[bool, Field(description="Also return the processed image as a base64 data URL")] = False,
) -> str:
    """
    Capture a screenshot of a Chrome tab.

    The image is resized to fit 900x600, compressed under 1 MiB and saved
    to disk. Returns JSON {"status", "path", "format", "size"}.
    """
    return await screenshots.capture_screenshot(
        tab_id=tabId,
        format=format,
        quality=quality,
        full_page=bool(fullPage),
        include_data=includeData,
    )
#endregion

#region Tools -- Network
@mcp.tool(name="capture_network_events")
@tool_envelope
async def capture_network_events(
    tabId: Annotated[str, Field(description="ID of the Chrome tab to monitor")],
    duration: Annotated[Optional[Annotated[float, Field(ge=1, le=60)]], Field(description="Duration in seconds to capture events (default: 10)")] = None,
    filters: Optional[NetworkFiltersInput] = None,
) -> str:
    """
    Capture XHR/fetch traffic from a Chrome tab for a fixed number of seconds.

    Returns a JSON array of completed requests with method, url, status,
    headers and timing. Requests without a response by the end of the
    window are not included.
    """
    filters = filters or NetworkFiltersInput()
    return await network.capture_network_events(
        tab_id=tabId,
        duration=duration,
        types=filters.types,
        url_pattern=filters.urlPattern,
    )
#endregion

#region Tools -- Navigation
@mcp.tool(name="load_url")
@tool_envelope
async def load_url(
    tabId: Annotated[str, Field(description="ID of the Chrome tab to load the URL in")],
    url: Annotated[str, Field(pattern=r"^[a-zA-Z][a-zA-Z0-9+.\-]*:\S+$", description="URL to load in the tab")],
) -> str:
    """Navigate a Chrome tab to a URL and wait for the page to load."""
    return await navigation.load_url(tabId, url)


@mcp.tool(name="get_console_logs")
@tool_envelope
async def get_console_logs(
    tabId: TabId,
    type: Annotated[Optional[str], Field(description="Only messages of this console type (log, info, warning, error, ...)")] = None,
    since: Annotated[Optional[float], Field(description="Only messages at or after this timestamp (ms since epoch)")] = None,
) -> str:
    """Console messages recorded for a tab since it was last navigated with load_url."""
    return await navigation.get_console_logs(tabId, log_type=type, since=since)
#endregion

#region Tools -- DOM
@mcp.tool(name="query_dom_elements")
@tool_envelope
async def query_dom_elements(
    tabId: Annotated[str, Field(description="ID of the Chrome tab to query")],
    selector: Annotated[str, Field(description="CSS selector to find elements")],
) -> str:
    """
    Query DOM elements with a CSS selector.

    Returns a JSON array of {nodeId, tagName, textContent, attributes,
    boundingBox, isVisible, ariaAttributes}.
    """
    return await interaction.query_dom_elements(tabId, selector)


@mcp.tool(name="click_element")
@tool_envelope
async def click_element(
    tabId: Annotated[str, Field(description="ID of the Chrome tab containing the element")],
    selector: Annotated[str, Field(description="CSS selector to find the element to click")],
) -> str:
    """Click the first element matching a CSS selector and report console output it triggered."""
    return await interaction.click_element(tabId, selector)
#endregion

#region Tools -- Debugging
@mcp.tool(name="get_debug_diagnostics_info")
@tool_envelope
async def get_debug_diagnostics_info() -> str:
    """Configuration, library versions and endpoint availability."""
    return await debugging.get_debug_diagnostics_info()
#endregion


def main() -> None:
    _configure_logging()
    logger.info("Chrome Tools MCP Server %s starting...", __version__)
    mcp.run()


if __name__ == "__main__":
    main()
