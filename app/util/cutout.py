"""
Background removal via rembg.

One rembg session is created per model name and reused across requests;
everything else (segmentation, alpha compositing, PNG encoding) happens
inside the library.
"""

import time
import logging
import threading

from rembg import new_session, remove

from ..config import get_settings

logger = logging.getLogger(__name__)

_sessions: dict = {}
_sessions_lock = threading.Lock()


def get_session(model_name: str):
    """Return the cached rembg session for ``model_name``, creating it on first use."""
    with _sessions_lock:
        session = _sessions.get(model_name)
        if session is None:
            logger.info("[cutout] Loading rembg model '%s'", model_name)
            session = new_session(model_name)
            _sessions[model_name] = session
        return session


def file_signature(data: bytes, length: int = 8) -> str:
    """Hex signature of the leading bytes (JPEG: FFD8FF, PNG: 89504E470D0A1A0A)."""
    return data[:length].hex().upper()


def remove_background(image_bytes: bytes, model_name: str | None = None) -> bytes:
    """
    Remove the background of an encoded image.

    Args:
        image_bytes: Encoded JPEG / PNG / WEBP bytes.
        model_name: rembg model, defaults to the configured preset.

    Returns:
        RGBA PNG bytes.
    """
    if not image_bytes:
        raise ValueError("Empty image data")

    model_name = model_name or get_settings().rembg_model
    logger.debug("[cutout] File signature: %s", file_signature(image_bytes))

    start = time.perf_counter()
    result = remove(image_bytes, session=get_session(model_name))
    logger.info(
        "[cutout] Background removed with %s in %.2fs (%d -> %d bytes)",
        model_name, time.perf_counter() - start, len(image_bytes), len(result),
    )
    return result
