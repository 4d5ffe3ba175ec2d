"""
Utility functions: Playwright renderer, HTML preprocessing, rembg cutout
and temp-upload bookkeeping.
"""

from .renderer import CaptureResult, capture_html, render_html_simple
from .html_prep import process_html_for_rendering, inline_google_fonts
from .uploads import UploadedFile, save_upload, remove_quietly

__all__ = [
    "CaptureResult",
    "capture_html",
    "render_html_simple",
    "process_html_for_rendering",
    "inline_google_fonts",
    "UploadedFile",
    "save_upload",
    "remove_quietly",
]
