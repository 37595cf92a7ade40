"""
mcp_chrome_tools/exceptions.py

Exceptions raised by the DevTools adapter and the image post-processor.
"""

from typing import Any, Optional


class ChromeToolsError(Exception):
    """
    Base class for every error raised by this package.
    """


class ChromeConnectionError(ChromeToolsError):
    """
    Raised when the DevTools endpoint cannot be reached.
    """


class CDPProtocolError(ChromeToolsError):
    """
    Raised when Chrome answers a command with an error object.
    """

    def __init__(self, method: str, code: Optional[int], message: str, data: Any = None):
        self.method = method
        self.code = code
        self.data = data
        detail = f" ({data})" if data else ""
        super().__init__(f"{method} failed: {message}{detail}")


class CDPTimeoutError(ChromeToolsError):
    """
    Raised when a command reply does not arrive within the command timeout.
    """


class NavigationError(ChromeToolsError):
    """
    Raised when Chrome reports an error for a navigation.
    """


class DOMQueryError(ChromeToolsError):
    """
    Raised when a selector query fails.
    """


class ElementNotFoundError(ChromeToolsError):
    """
    Raised when a selector matches no element.
    """


class ImageProcessingError(ChromeToolsError):
    """
    Raised when a screenshot cannot be re-encoded.
    """


class ImageTooLargeError(ImageProcessingError):
    """
    Raised when every step of the compression ladder stays above the size ceiling.
    """


__all__ = [
    "ChromeToolsError",
    "ChromeConnectionError",
    "CDPProtocolError",
    "CDPTimeoutError",
    "NavigationError",
    "DOMQueryError",
    "ElementNotFoundError",
    "ImageProcessingError",
    "ImageTooLargeError",
]
