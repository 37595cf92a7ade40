"""
Centralized server state.

Holds the configuration read at startup, the per-tab console log registry,
and the two entry points into the DevTools endpoint (target listing and
session connection). Actions receive the context explicitly instead of
reading globals, so tests can swap the transport for a fake.

Usage:
    from mcp_chrome_tools.context import get_context

    ctx = get_context()
    async with ctx.open_session(tab_id) as session:
        await session.send("Page.enable")
"""

import contextlib
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .config import ChromeToolsConfig, get_env_config
from .browser.cdp import CDPSession, connect_session, fetch_targets
from .browser.console_logs import ConsoleLogRegistry


@dataclass
class ToolsContext:
    """
    Attributes:
        config: Immutable settings for this process
        console_logs: Console messages collected for navigated tabs
        session_factory: Coroutine (config, tab_id) -> connected CDPSession
        targets_fetcher: Coroutine (host, port) -> list of target descriptors
    """

    config: ChromeToolsConfig = field(default_factory=ChromeToolsConfig)
    console_logs: Optional[ConsoleLogRegistry] = None
    session_factory: Callable[[ChromeToolsConfig, str], Awaitable[CDPSession]] = connect_session
    targets_fetcher: Callable[[str, int], Awaitable[List[Dict[str, Any]]]] = fetch_targets

    def __post_init__(self):
        if self.console_logs is None:
            self.console_logs = ConsoleLogRegistry(capacity=self.config.console_buffer_size)

    async def connect(self, tab_id: str) -> CDPSession:
        """Connected session the caller must close (or hand to the registry)."""
        return await self.session_factory(self.config, tab_id)

    @contextlib.asynccontextmanager
    async def open_session(self, tab_id: str):
        session = await self.connect(tab_id)
        try:
            yield session
        finally:
            await session.close()

    async def list_targets(self) -> List[Dict[str, Any]]:
        return await self.targets_fetcher(self.config.host, self.config.port)


# ============================================================================
# Global Context Management
# ============================================================================

_global_context: Optional[ToolsContext] = None


def get_context() -> ToolsContext:
    """
    Get or create the global context.

    This is a singleton pattern - all calls return the same context instance.
    Use reset_context() to clear the singleton (mainly for testing).
    """
    global _global_context

    if _global_context is None:
        _global_context = ToolsContext(config=get_env_config())

    return _global_context


def set_context(ctx: ToolsContext) -> None:
    """Install a prepared context (tests, embedding)."""
    global _global_context
    _global_context = ctx


def reset_context() -> None:
    """
    Reset the global context.

    Sessions held by the console log registry are not closed here;
    await `ctx.console_logs.close_all()` first when that matters.
    """
    global _global_context
    _global_context = None


__all__ = [
    "ToolsContext",
    "get_context",
    "set_context",
    "reset_context",
]
