"""Screenshot re-encoding under a byte ceiling."""

import io
import math
import base64
import binascii
from typing import Optional

from PIL import Image

from ..config.paths import screenshot_path
from ..constants import (
    MAX_IMAGE_BYTES,
    TARGET_WIDTH,
    TARGET_HEIGHT,
    WEBP_QUALITY,
    WEBP_FALLBACK_QUALITY,
    WEBP_METHOD,
    PNG_COMPRESS_LEVEL,
    PNG_PALETTE_COLORS,
    PNG_REDUCED_PALETTE_COLORS,
)
from ..exceptions import ImageProcessingError, ImageTooLargeError
from ..models import ProcessedImage

import logging
logger = logging.getLogger(__name__)


def _fit(image: Image.Image, width: int, height: int) -> Image.Image:
    """Shrink to fit inside width x height keeping the aspect ratio; never enlarges."""
    fitted = image.copy()
    fitted.thumbnail((max(width, 1), max(height, 1)), Image.Resampling.LANCZOS)
    if fitted.mode not in ("RGB", "RGBA"):
        fitted = fitted.convert("RGBA")
    return fitted


def _encode(image: Image.Image, format: str, **options) -> bytes:
    buffer = io.BytesIO()
    if format == "PNG" and "colors" in options:
        image = image.quantize(colors=options.pop("colors"))
    image.save(buffer, format=format, **options)
    return buffer.getvalue()


def _data_url(mime: str, payload: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def _fits(payload: bytes) -> bool:
    return len(payload) <= MAX_IMAGE_BYTES


def _compress(raw: bytes) -> ProcessedImage:
    source = Image.open(io.BytesIO(raw))
    source.load()
    image = _fit(source, TARGET_WIDTH, TARGET_HEIGHT)

    # 1-2. WebP, then WebP at lower quality
    try:
        webp = _encode(image, "WEBP", quality=WEBP_QUALITY, method=WEBP_METHOD, lossless=False)
        if _fits(webp):
            return ProcessedImage(data=_data_url("image/webp", webp), size=len(webp))

        webp = _encode(image, "WEBP", quality=WEBP_FALLBACK_QUALITY, method=WEBP_METHOD,
                       lossless=False, alpha_quality=WEBP_FALLBACK_QUALITY)
        if _fits(webp):
            return ProcessedImage(data=_data_url("image/webp", webp), size=len(webp))
        logger.info("WebP output is %d bytes, falling back to PNG", len(webp))
    except (OSError, KeyError, ValueError) as e:
        logger.warning("WebP processing failed, falling back to PNG: %s", e)

    # 3. Palette PNG at maximum compression
    png = _encode(image, "PNG", optimize=True, compress_level=PNG_COMPRESS_LEVEL, colors=PNG_PALETTE_COLORS)
    if _fits(png):
        return ProcessedImage(data=_data_url("image/png", png), size=len(png))

    # 4. Shrink by the square root of the overshoot and cut the palette
    scale = math.sqrt(MAX_IMAGE_BYTES / len(png))
    smaller = _fit(source, math.floor(TARGET_WIDTH * scale), math.floor(TARGET_HEIGHT * scale))
    png = _encode(smaller, "PNG", optimize=True, compress_level=PNG_COMPRESS_LEVEL, colors=PNG_REDUCED_PALETTE_COLORS)
    if _fits(png):
        return ProcessedImage(data=_data_url("image/png", png), size=len(png))

    raise ImageTooLargeError("Image is too large even after compression")


def process_image(base64_data: str) -> ProcessedImage:
    """
    Re-encode a base64 screenshot so it stays under 1 MiB.

    The image is first fitted into 900x600, then tried as WebP q80, WebP q60,
    palette PNG, and finally a smaller palette PNG; the first result under
    the ceiling wins. Read the data URL prefix to learn which format that was.

    Raises:
        ImageTooLargeError: every step stayed above the ceiling
        ImageProcessingError: the input could not be decoded or encoded
    """
    try:
        raw = base64.b64decode(base64_data, validate=True)
        return _compress(raw)
    except ImageProcessingError:
        raise
    except (binascii.Error, OSError, ValueError) as e:
        raise ImageProcessingError(f"Failed to process image: {e}") from e


def save_image(image: ProcessedImage, directory: Optional[str] = None) -> str:
    """Write the processed image to the screenshot directory and return its path."""
    payload = base64.b64decode(image.data.split(",", 1)[1])
    path = screenshot_path(image.extension, configured=directory)
    with open(path, "wb") as f:
        f.write(payload)
    return path


__all__ = [
    "process_image",
    "save_image",
]
