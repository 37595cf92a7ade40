# mcp_chrome_tools/models.py

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from .constants import MAX_IMAGE_BYTES
from .exceptions import ImageTooLargeError


class RequestType:
    XHR = "xhr"
    FETCH = "fetch"

    ALL = (XHR, FETCH)

    @staticmethod
    def classify(resource_type: Optional[str]) -> str:
        # Anything that is not an XHR is reported as fetch
        if (resource_type or "").lower() == RequestType.XHR:
            return RequestType.XHR
        return RequestType.FETCH


class ScreenshotFormat:
    JPEG = "jpeg"
    PNG = "png"

    ALL = (JPEG, PNG)


@dataclass
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class DOMElement:
    node_id: int
    tag_name: str
    text_content: Optional[str]
    attributes: Dict[str, str]
    bounding_box: Optional[BoundingBox]
    is_visible: bool
    aria_attributes: Dict[str, str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "tagName": self.tag_name,
            "textContent": self.text_content,
            "attributes": dict(self.attributes),
            "boundingBox": self.bounding_box.to_dict() if self.bounding_box else None,
            "isVisible": self.is_visible,
            "ariaAttributes": dict(self.aria_attributes),
        }


@dataclass
class NetworkEvent:
    """
    One XHR/fetch exchange. Created when the request is sent and completed
    when the matching response arrives.
    """
    type: str
    method: str
    url: str
    request_headers: Dict[str, Any]
    request_time: Optional[float]
    status: Optional[int] = None
    status_text: Optional[str] = None
    response_headers: Optional[Dict[str, Any]] = None
    response_time: Optional[float] = None

    def complete(self, response: Dict[str, Any], timestamp: Optional[float]) -> None:
        self.status = response.get("status")
        self.status_text = response.get("statusText", "")
        self.response_headers = response.get("headers") or {}
        self.response_time = timestamp

    def to_dict(self) -> Dict[str, Any]:
        timing: Dict[str, Any] = {"requestTime": self.request_time}
        if self.response_time is not None:
            timing["responseTime"] = self.response_time
        return {
            "type": self.type,
            "method": self.method,
            "url": self.url,
            "status": self.status,
            "statusText": self.status_text,
            "requestHeaders": self.request_headers,
            "responseHeaders": self.response_headers,
            "timing": timing,
        }


@dataclass
class NetworkFilters:
    types: Optional[List[str]] = None
    url_pattern: Optional[str] = None


@dataclass
class ConsoleLogEntry:
    type: str
    message: str
    timestamp: float  # ms since epoch

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message, "timestamp": self.timestamp}


@dataclass
class ProcessedImage:
    data: str  # data URL, e.g. "data:image/webp;base64,..."
    size: int
    format: str = "png"  # nominal tag; the data URL prefix carries the real format

    def __post_init__(self):
        if self.size > MAX_IMAGE_BYTES:
            raise ImageTooLargeError(
                f"Processed image is {self.size} bytes, above the {MAX_IMAGE_BYTES} byte ceiling"
            )

    @property
    def mime_type(self) -> str:
        return self.data[len("data:"):self.data.index(";")]

    @property
    def extension(self) -> str:
        return self.mime_type.split("/", 1)[1]


@dataclass
class ScriptResult:
    result: Dict[str, Any]
    console_output: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"result": self.result, "consoleOutput": list(self.console_output)}


__all__ = [
    "RequestType",
    "ScreenshotFormat",
    "BoundingBox",
    "DOMElement",
    "NetworkEvent",
    "NetworkFilters",
    "ConsoleLogEntry",
    "ProcessedImage",
    "ScriptResult",
]
