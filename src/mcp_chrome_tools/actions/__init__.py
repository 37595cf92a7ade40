"""
Tab operations against the DevTools endpoint.

Each operation opens its own session to one tab, issues a few commands and
closes the session again. They return Python values; JSON shaping happens
in `mcp_chrome_tools.tools`.
"""

from .tabs import list_tabs, is_available
from .scripts import execute_script
from .screenshots import capture_screenshot
from .network import capture_network_events, clamp_duration, NetworkCapture
from .navigation import load_url
from .elements import query_dom_elements, click_element

__all__ = [
    "list_tabs",
    "is_available",
    "execute_script",
    "capture_screenshot",
    "capture_network_events",
    "clamp_duration",
    "NetworkCapture",
    "load_url",
    "query_dom_elements",
    "click_element",
]
