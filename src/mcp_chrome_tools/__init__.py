"""
Chrome tools for MCP agents.

This server does not launch or own a browser. It attaches to a Chrome that
is already running with remote debugging enabled (locally, or through an SSH
tunnel) and exposes a handful of operations over it:

    list_tabs, execute_script, capture_screenshot, capture_network_events,
    load_url, query_dom_elements, click_element, get_console_logs

Every operation opens its own DevTools session against one tab and closes it
again before returning. The only state kept between calls is the console log
buffer that `load_url` fills for the navigated tab.
"""

__version__ = "1.3.0"

__all__ = ["__version__"]
