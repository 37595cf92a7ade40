"""Tab listing and script execution tool implementations."""

import json

from ..context import get_context
from ..actions import tabs, scripts


async def list_tabs() -> str:
    """JSON array of the tabs Chrome reports."""
    targets = await tabs.list_tabs(get_context())
    return json.dumps(targets, indent=2)


async def execute_script(tab_id: str, script: str) -> str:
    """
    Run JavaScript in a tab.

    Returns:
        JSON string {"result": <Runtime.evaluate result>, "consoleOutput": ["[log] ...", ...]}
    """
    result = await scripts.execute_script(get_context(), tab_id, script)
    return json.dumps(result.to_dict(), indent=2)


__all__ = ['list_tabs', 'execute_script']
