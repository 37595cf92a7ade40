"""Environment configuration and validation."""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from ..constants import (
    DEFAULT_DEBUG_URL,
    DEFAULT_DEBUG_PORT,
    DEFAULT_ERROR_HELP,
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_CONSOLE_BUFFER_SIZE,
)

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChromeToolsConfig:
    """
    Settings for one server process. Built once at startup and passed to
    the adapter; nothing else reads the environment.

    Attributes:
        debug_url: Base URL of the DevTools endpoint, e.g. http://localhost:9222
        connection_type: Free-text label used in log lines ("direct", "ssh-tunnel", ...)
        error_help: Hint appended to connection failure messages
        screenshot_dir: Where processed screenshots are written (None = temp dir default)
        console_buffer_size: Entries kept per tab by the console log registry
        command_timeout: Seconds to wait for a single DevTools command reply
    """

    debug_url: str = DEFAULT_DEBUG_URL
    connection_type: str = "direct"
    error_help: str = DEFAULT_ERROR_HELP
    screenshot_dir: Optional[str] = None
    console_buffer_size: int = DEFAULT_CONSOLE_BUFFER_SIZE
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT

    @property
    def host(self) -> str:
        return urlparse(self.debug_url).hostname or "localhost"

    @property
    def port(self) -> int:
        try:
            port = urlparse(self.debug_url).port
        except ValueError:
            port = None
        return port or DEFAULT_DEBUG_PORT


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    if not raw.isdigit() or int(raw) < 1:
        raise EnvironmentError(f"{name} must be a positive integer, got {raw!r}.")
    return int(raw)


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise EnvironmentError(f"{name} must be a number, got {raw!r}.")
    if value <= 0:
        raise EnvironmentError(f"{name} must be greater than zero, got {raw!r}.")
    return value


def get_env_config() -> ChromeToolsConfig:
    """
    Read environment variables into a ChromeToolsConfig.

    Optional:   CHROME_DEBUG_URL (default http://localhost:9222)
                CHROME_CONNECTION_TYPE (default 'direct')
                CHROME_ERROR_HELP
                CHROME_TOOLS_SCREENSHOT_DIR
                CHROME_TOOLS_CONSOLE_BUFFER
                CHROME_TOOLS_COMMAND_TIMEOUT

    When Chrome runs on another machine, point CHROME_DEBUG_URL at the local
    end of the SSH tunnel and set CHROME_ERROR_HELP to something like
    "Make sure the SSH tunnel is running: ssh -N -L 9222:localhost:9222 user@host".
    """
    debug_url = (os.getenv("CHROME_DEBUG_URL") or "").strip() or DEFAULT_DEBUG_URL
    parsed = urlparse(debug_url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise EnvironmentError(f"CHROME_DEBUG_URL must be an http(s) URL, got {debug_url!r}.")

    connection_type = (os.getenv("CHROME_CONNECTION_TYPE") or "").strip() or "direct"
    error_help = (os.getenv("CHROME_ERROR_HELP") or "").strip() or DEFAULT_ERROR_HELP
    screenshot_dir = (os.getenv("CHROME_TOOLS_SCREENSHOT_DIR") or "").strip() or None

    return ChromeToolsConfig(
        debug_url=debug_url.rstrip("/"),
        connection_type=connection_type,
        error_help=error_help,
        screenshot_dir=screenshot_dir,
        console_buffer_size=_int_env("CHROME_TOOLS_CONSOLE_BUFFER", DEFAULT_CONSOLE_BUFFER_SIZE),
        command_timeout=_float_env("CHROME_TOOLS_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT),
    )


__all__ = [
    "ChromeToolsConfig",
    "get_env_config",
]
