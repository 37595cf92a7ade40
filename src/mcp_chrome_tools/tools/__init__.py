# mcp_chrome_tools/tools/__init__.py
"""
MCP tool implementations - async wrappers that return text responses.

This package contains high-level tool implementations that:
- Fetch the process context and call the tab operations in `actions`
- Serialize results to JSON (or a confirmation sentence)
- Leave error mapping to the `tool_envelope` decorator
"""

from .tabs import (
    list_tabs,
    execute_script,
)

from .screenshots import (
    capture_screenshot,
)

from .network import (
    capture_network_events,
)

from .navigation import (
    load_url,
    get_console_logs,
)

from .interaction import (
    query_dom_elements,
    click_element,
)

from .debugging import (
    get_debug_diagnostics_info,
)

__all__ = [
    # Tabs and scripts
    'list_tabs',
    'execute_script',
    # Screenshots
    'capture_screenshot',
    # Network
    'capture_network_events',
    # Navigation
    'load_url',
    'get_console_logs',
    # Interaction
    'query_dom_elements',
    'click_element',
    # Debugging
    'get_debug_diagnostics_info',
]
