"""DOM queries and synthetic clicks."""

import json
import asyncio
from typing import Any, Dict, List, Optional, Tuple

from ..context import ToolsContext
from ..constants import CLICK_CONSOLE_WAIT_SECS
from ..exceptions import ChromeToolsError, DOMQueryError, ElementNotFoundError
from ..models import BoundingBox, DOMElement
from ..browser.cdp import CDPSession
from ..browser.console_logs import format_console_line

import logging
logger = logging.getLogger(__name__)


SELECTOR_HINT = (
    "Note: :contains() is not a valid CSS selector. "
    "Use a valid CSS selector like tag names, classes, or IDs."
)

IS_VISIBLE_FN = """function() {
    const style = window.getComputedStyle(this);
    return style.display !== 'none' &&
           style.visibility !== 'hidden' &&
           style.opacity !== '0';
}"""

CLICK_EXPRESSION = """(() => {{
    const element = document.querySelector({selector});
    if (!element) throw new Error('Element not found');
    element.dispatchEvent(new MouseEvent('click', {{
        bubbles: true,
        cancelable: true,
        view: window,
        clientX: {x},
        clientY: {y}
    }}));
}})()"""


def split_attributes(flat: Optional[List[str]]) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Turn DevTools' flat [name1, value1, name2, value2, ...] list into
    (attributes, aria_attributes).
    """
    flat = flat or []
    attributes = dict(zip(flat[0::2], flat[1::2]))
    aria = {name: value for name, value in attributes.items() if name.startswith("aria-")}
    return attributes, aria


def bounding_box(model: Optional[Dict[str, Any]]) -> Optional[BoundingBox]:
    if not model:
        return None
    content = model["content"]
    return BoundingBox(x=content[0], y=content[1], width=model["width"], height=model["height"])


def center_of(model: Dict[str, Any]) -> Tuple[int, int]:
    content = model["content"]
    return round(content[0] + model["width"] / 2), round(content[1] + model["height"] / 2)


def _exception_text(details: Dict[str, Any]) -> str:
    exception = details.get("exception") or {}
    return exception.get("description") or details.get("text") or "unknown error"


async def _query_node_ids(session: CDPSession, selector: str) -> List[int]:
    document = await session.send("DOM.getDocument")
    result = await session.send("DOM.querySelectorAll", {
        "nodeId": document["root"]["nodeId"],
        "selector": selector,
    })
    return result.get("nodeIds") or []


async def _box_model(session: CDPSession, node_id: int) -> Optional[Dict[str, Any]]:
    # Nodes that are not rendered (display: none, <head> children, ...) have no box model
    try:
        return (await session.send("DOM.getBoxModel", {"nodeId": node_id}))["model"]
    except ChromeToolsError:
        return None


async def _is_visible(session: CDPSession, node_id: int) -> bool:
    resolved = await session.send("DOM.resolveNode", {"nodeId": node_id})
    result = await session.send("Runtime.callFunctionOn", {
        "functionDeclaration": IS_VISIBLE_FN,
        "objectId": resolved["object"]["objectId"],
        "returnByValue": True,
    })
    return result.get("result", {}).get("value") is True


async def _describe(session: CDPSession, node_id: int) -> DOMElement:
    node = (await session.send("DOM.describeNode", {"nodeId": node_id}))["node"]
    model = await _box_model(session, node_id)
    visible = await _is_visible(session, node_id)
    attributes, aria = split_attributes(node.get("attributes"))
    return DOMElement(
        node_id=node_id,
        tag_name=node.get("nodeName", "").lower(),
        text_content=node.get("nodeValue") or None,
        attributes=attributes,
        bounding_box=bounding_box(model),
        is_visible=visible,
        aria_attributes=aria,
    )


async def query_dom_elements(ctx: ToolsContext, tab_id: str, selector: str) -> List[DOMElement]:
    """
    Snapshot every element matching a CSS selector.

    Raises:
        DOMQueryError: on any failure; the message reminds the caller that
            jQuery-style pseudo selectors such as :contains() are not CSS
    """
    logger.info('Attempting to query DOM elements in tab %s with selector "%s"', tab_id, selector)
    try:
        async with ctx.open_session(tab_id) as session:
            await session.send("DOM.enable")
            await session.send("Runtime.enable")
            node_ids = await _query_node_ids(session, selector)
            elements = await asyncio.gather(*(_describe(session, node_id) for node_id in node_ids))
    except Exception as e:
        logger.error("DOM query failed: %s", e)
        raise DOMQueryError(f'Failed to query DOM elements with selector "{selector}": {e}. {SELECTOR_HINT}') from e

    logger.info("Successfully found %d elements matching selector", len(elements))
    return list(elements)


async def click_element(ctx: ToolsContext, tab_id: str, selector: str) -> List[str]:
    """
    Click the first element matching `selector` and return the console lines
    logged within a second of the click.

    The click is a script-dispatched MouseEvent at the element's centre, so
    page handlers run but browser defaults (following links, focusing inputs)
    may not.

    Raises:
        ElementNotFoundError: nothing matches the selector
    """
    logger.info('Attempting to click element in tab %s with selector "%s"', tab_id, selector)
    async with ctx.open_session(tab_id) as session:
        await session.send("DOM.enable")
        await session.send("Runtime.enable")

        node_ids = await _query_node_ids(session, selector)
        if not node_ids:
            raise ElementNotFoundError(f"No element found matching selector: {selector}")

        model = (await session.send("DOM.getBoxModel", {"nodeId": node_ids[0]}))["model"]
        x, y = center_of(model)

        console = session.subscribe("Runtime.consoleAPICalled")
        result = await session.send("Runtime.evaluate", {
            "expression": CLICK_EXPRESSION.format(selector=json.dumps(selector), x=x, y=y),
            "awaitPromise": True,
        })
        if result.get("exceptionDetails"):
            raise ChromeToolsError(f"Click on {selector!r} failed: {_exception_text(result['exceptionDetails'])}")

        # Whatever the handler logs first, or nothing after a second
        first = await console.get(timeout=CLICK_CONSOLE_WAIT_SECS)
        items = ([first] if first else []) + console.drain()
        console_output = [format_console_line(params) for _, params in items]

    logger.info("Successfully clicked element")
    return console_output


__all__ = [
    "SELECTOR_HINT",
    "split_attributes",
    "bounding_box",
    "center_of",
    "query_dom_elements",
    "click_element",
]
