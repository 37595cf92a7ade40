"""Configuration management for the DevTools connection."""

from .environment import (
    ChromeToolsConfig,
    get_env_config,
)

from .paths import (
    get_screenshot_dir,
    screenshot_path,
    log_file_path,
)

__all__ = [
    "ChromeToolsConfig",
    "get_env_config",
    "get_screenshot_dir",
    "screenshot_path",
    "log_file_path",
]
