"""
Helpers shared by both route modules.
"""

import time
from datetime import datetime, timezone

from ..config import get_settings
from ..errors import ValidationError

_STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    """Seconds since this process imported the API package."""
    return round(time.monotonic() - _STARTED_AT, 3)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def require_dimensions(width: int, height: int) -> None:
    """Reject viewports larger than the configured ceiling."""
    limit = get_settings().render_max_dimension
    if width > limit or height > limit:
        raise ValidationError(f"width and height must not exceed {limit}px")


def processing_time_header(seconds: float) -> str:
    return f"{seconds:.2f}"
