"""Image post-processing and diagnostics helpers."""

from .images import process_image, save_image
from .diagnostics import collect_diagnostics

__all__ = [
    "process_image",
    "save_image",
    "collect_diagnostics",
]
