"""Raw screenshot capture."""

import math
from typing import Optional

from ..context import ToolsContext
from ..constants import DEFAULT_JPEG_QUALITY, FULL_PAGE_WIDTH
from ..exceptions import ChromeToolsError
from ..models import ScreenshotFormat

import logging
logger = logging.getLogger(__name__)


async def capture_screenshot(
    ctx: ToolsContext,
    tab_id: str,
    format: Optional[str] = None,
    quality: Optional[int] = None,
    full_page: bool = False,
) -> str:
    """
    Capture the tab and return Chrome's base64 payload untouched.

    For a full page capture the device metrics are overridden to the
    document's height first, and the override is cleared again before
    the session closes, whether or not the capture succeeded.

    Args:
        format: "png" (default) or "jpeg"
        quality: 1-100, only sent for jpeg (default 80)
        full_page: capture the whole scrollable page instead of the viewport
    """
    fmt = format or ScreenshotFormat.PNG
    if fmt not in ScreenshotFormat.ALL:
        raise ValueError(f"Unsupported screenshot format: {fmt!r}")

    logger.info("Attempting to capture screenshot of tab %s", tab_id)
    async with ctx.open_session(tab_id) as session:
        await session.send("Page.enable")
        captured = False
        try:
            if full_page:
                document = await session.send("DOM.getDocument")
                box = await session.send("DOM.getBoxModel", {"nodeId": document["root"]["nodeId"]})
                await session.send("Emulation.setDeviceMetricsOverride", {
                    "width": FULL_PAGE_WIDTH,
                    "height": math.ceil(box["model"]["height"]),
                    "deviceScaleFactor": 1,
                    "mobile": False,
                })

            params = {
                "format": fmt,
                "fromSurface": True,
                "captureBeyondViewport": bool(full_page),
            }
            if fmt == ScreenshotFormat.JPEG:
                params["quality"] = quality or DEFAULT_JPEG_QUALITY

            result = await session.send("Page.captureScreenshot", params)
            captured = True
        finally:
            if full_page:
                try:
                    await session.send("Emulation.clearDeviceMetricsOverride")
                except ChromeToolsError as e:
                    if captured:
                        raise
                    # The capture error is already propagating
                    logger.warning("Failed to clear device metrics override on tab %s: %s", tab_id, e)

    logger.info("Screenshot capture successful")
    return result["data"]


__all__ = ["capture_screenshot"]
