"""
Global constants and defaults.
No dependencies - safe to import from anywhere.
"""

# ============================================================================
# DevTools endpoint
# ============================================================================

DEFAULT_DEBUG_URL = "http://localhost:9222"
"""Base URL of the Chrome remote debugging endpoint."""

DEFAULT_DEBUG_PORT = 9222
"""Port used when the debug URL does not carry one."""

DEFAULT_ERROR_HELP = (
    "Make sure Chrome is running with remote debugging enabled "
    "(--remote-debugging-port=9222)"
)
"""Hint appended to connection failures."""

DEFAULT_COMMAND_TIMEOUT = 30.0
"""Seconds to wait for a single DevTools command reply."""

HTTP_TIMEOUT_SECS = 5.0
"""Timeout for the HTTP target listing."""

EVENT_CHANNEL_CAPACITY = 1000
"""Maximum number of undelivered events buffered per subscription."""


# ============================================================================
# Operations
# ============================================================================

NETWORK_CAPTURE_DEFAULT_SECS = 10
NETWORK_CAPTURE_MIN_SECS = 1
NETWORK_CAPTURE_MAX_SECS = 60

CLICK_CONSOLE_WAIT_SECS = 1.0
"""How long click_element waits for console output after dispatching."""

FULL_PAGE_WIDTH = 1920
"""Emulated viewport width for full page screenshots."""

DEFAULT_JPEG_QUALITY = 80

DEFAULT_CONSOLE_BUFFER_SIZE = 1000
"""Entries kept per tab in the console log registry."""


# ============================================================================
# Image post-processing
# ============================================================================

MAX_IMAGE_BYTES = 1024 * 1024
"""Size ceiling for processed screenshots (1 MiB)."""

TARGET_WIDTH = 900
TARGET_HEIGHT = 600

WEBP_QUALITY = 80
WEBP_FALLBACK_QUALITY = 60
WEBP_METHOD = 6
PNG_COMPRESS_LEVEL = 9
PNG_PALETTE_COLORS = 256
PNG_REDUCED_PALETTE_COLORS = 128

SCREENSHOT_DIR_NAME = "chrome-tools-screenshots"


__all__ = [
    "DEFAULT_DEBUG_URL",
    "DEFAULT_DEBUG_PORT",
    "DEFAULT_ERROR_HELP",
    "DEFAULT_COMMAND_TIMEOUT",
    "HTTP_TIMEOUT_SECS",
    "EVENT_CHANNEL_CAPACITY",
    "NETWORK_CAPTURE_DEFAULT_SECS",
    "NETWORK_CAPTURE_MIN_SECS",
    "NETWORK_CAPTURE_MAX_SECS",
    "CLICK_CONSOLE_WAIT_SECS",
    "FULL_PAGE_WIDTH",
    "DEFAULT_JPEG_QUALITY",
    "DEFAULT_CONSOLE_BUFFER_SIZE",
    "MAX_IMAGE_BYTES",
    "TARGET_WIDTH",
    "TARGET_HEIGHT",
    "WEBP_QUALITY",
    "WEBP_FALLBACK_QUALITY",
    "WEBP_METHOD",
    "PNG_COMPRESS_LEVEL",
    "PNG_PALETTE_COLORS",
    "PNG_REDUCED_PALETTE_COLORS",
    "SCREENSHOT_DIR_NAME",
]
