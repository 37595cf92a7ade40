"""DOM query and click tool implementations."""

import json

from ..context import get_context
from ..actions import elements


async def query_dom_elements(tab_id: str, selector: str) -> str:
    found = await elements.query_dom_elements(get_context(), tab_id, selector)
    return json.dumps([element.to_dict() for element in found], indent=2)


async def click_element(tab_id: str, selector: str) -> str:
    console_output = await elements.click_element(get_context(), tab_id, selector)
    return json.dumps({
        "message": "Successfully clicked element",
        "consoleOutput": console_output,
    }, indent=2)


__all__ = ['query_dom_elements', 'click_element']
