"""Path utilities for screenshots and log files."""

import os
import tempfile
import datetime
from pathlib import Path
from typing import Optional

from ..constants import SCREENSHOT_DIR_NAME


def get_screenshot_dir(configured: Optional[str] = None) -> str:
    """
    Get the screenshot directory path.

    Uses the configured directory if set, otherwise <tempdir>/chrome-tools-screenshots.
    The directory is created if it doesn't exist.
    """
    screenshot_dir = configured or os.path.join(tempfile.gettempdir(), SCREENSHOT_DIR_NAME)
    Path(screenshot_dir).mkdir(parents=True, exist_ok=True)
    return screenshot_dir


def screenshot_path(extension: str, configured: Optional[str] = None, now: Optional[datetime.datetime] = None) -> str:
    """Timestamped file path for a new screenshot, e.g. screenshot-2024-05-01T10-11-12-345Z.webp"""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"
    return os.path.join(get_screenshot_dir(configured), f"screenshot-{stamp}.{extension}")


def log_file_path() -> str:
    """Path of the server log file. stdout carries the MCP stream, so logs go here and to stderr."""
    return os.path.join(tempfile.gettempdir(), "mcp_chrome_tools.log")


__all__ = [
    "get_screenshot_dir",
    "screenshot_path",
    "log_file_path",
]
