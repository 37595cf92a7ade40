# mcp_chrome_tools/decorators/envelope.py

import os
import json
import asyncio
import inspect
import functools
import traceback
from typing import Any, Callable

from mcp.server.fastmcp.exceptions import ToolError

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "tool_envelope",
]


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return json.dumps(value, indent=2, ensure_ascii=False, default=lambda o: getattr(o, "__dict__", repr(o)))


def _tool_error(name: str, err: Exception, include_tb: bool) -> ToolError:
    logger.error("Error in %s tool: %s", name, err, exc_info=include_tb)
    message = f"Error: {err}"
    if include_tb:
        message += "\n\n" + traceback.format_exc()
    return ToolError(message)


def tool_envelope(func: Callable):
    """
    Decorator for MCP tool functions:
      - Works with both async and sync callables.
      - On success: ensures the return value is a string (json.dumps for non-strings).
      - On error: logs, then raises ToolError("Error: <message>") so the client
        receives an error-flagged text result.
    Environment:
      - Set MCT_TOOL_ERRORS_TRACEBACK=1 to append the traceback to error messages.
    """
    include_tb = os.getenv("MCT_TOOL_ERRORS_TRACEBACK", "0") not in ("0", "false", "False", "")
    name = func.__name__

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except asyncio.CancelledError:
                # Preserve cooperative cancellation semantics
                raise
            except ToolError:
                raise
            except Exception as e:
                raise _tool_error(name, e, include_tb) from e
            return _normalize(result)
        return wrapper
    else:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except ToolError:
                raise
            except Exception as e:
                raise _tool_error(name, e, include_tb) from e
            return _normalize(result)
        return wrapper
