"""Screenshot capture tool implementation."""

import json
import asyncio
from typing import Optional

from ..context import get_context
from ..actions import screenshots
from ..utils.images import process_image, save_image

import logging
logger = logging.getLogger(__name__)


async def capture_screenshot(
    tab_id: str,
    format: Optional[str] = None,
    quality: Optional[int] = None,
    full_page: bool = False,
    include_data: bool = False,
) -> str:
    """
    Capture a tab, shrink it under 1 MiB and save it to the screenshot directory.

    Args:
        tab_id: Tab to capture
        format: Initial capture format (jpeg/png); the saved file is WebP with PNG fallback
        quality: Initial capture quality (1-100, jpeg only)
        full_page: Capture the whole scrollable page
        include_data: Also return the processed image as a data URL

    Returns:
        JSON string with status, saved path, produced format and size in bytes
    """
    ctx = get_context()
    raw = await screenshots.capture_screenshot(ctx, tab_id, format=format, quality=quality, full_page=full_page)

    logger.info("Screenshot captured, optimizing with WebP...")
    image = await asyncio.to_thread(process_image, raw)
    logger.info("Image optimized successfully (%s, %dKB)", image.extension.upper(), round(image.size / 1024))

    path = save_image(image, ctx.config.screenshot_dir)
    logger.info("Screenshot saved to: %s", path)

    payload = {
        "status": "Screenshot successful.",
        "path": path,
        "format": image.mime_type,
        "size": image.size,
    }
    if include_data:
        payload["data"] = image.data
    return json.dumps(payload)


__all__ = ['capture_screenshot']
