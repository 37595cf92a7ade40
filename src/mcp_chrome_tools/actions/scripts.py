"""Script evaluation in a tab."""

from ..context import ToolsContext
from ..models import ScriptResult
from ..browser.console_logs import format_console_line

import logging
logger = logging.getLogger(__name__)


async def execute_script(ctx: ToolsContext, tab_id: str, script: str) -> ScriptResult:
    """
    Evaluate `script` in the tab and collect the console output it produced.

    The evaluation returns by value and has the command line API ($, $$,
    copy(), ...) available. Protocol errors propagate unchanged; an
    exception thrown by the script itself is reported inside `result`
    the way Runtime.evaluate reports it.
    """
    logger.info("Attempting to execute script in tab %s", tab_id)
    async with ctx.open_session(tab_id) as session:
        await session.send("Runtime.enable")
        console = session.subscribe("Runtime.consoleAPICalled")

        evaluation = await session.send("Runtime.evaluate", {
            "expression": script,
            "returnByValue": True,
            "includeCommandLineAPI": True,
        })

        console_output = []
        for _, params in console.drain():
            line = format_console_line(params)
            console_output.append(line)
            logger.debug("Chrome Console: %s", line)

    logger.info("Script execution successful")
    return ScriptResult(
        result=evaluation.get("result", {}),
        console_output=console_output,
    )


__all__ = ["execute_script"]
