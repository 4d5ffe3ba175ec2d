"""
FastAPI route definitions for the enhanced render API.

- POST /render  — JSON {html, width, height, deviceScaleFactor} -> PNG
- GET  /health  — liveness + uptime
"""

import logging

from fastapi import APIRouter
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from .common import processing_time_header, require_dimensions, uptime_seconds, utc_timestamp
from .schemas import EnhancedRenderRequest, RenderHealthResponse
from ..config import get_settings
from ..errors import ProcessingError, ValidationError
from ..util.renderer import capture_html

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/render", tags=["render"])
async def render_enhanced(request: EnhancedRenderRequest):
    """
    Render HTML through the full capture pipeline.

    - HTTP 400 if html is missing, empty or not a string.
    - HTTP 500 on any browser / pipeline failure; the stack trace is included
      outside production.
    """
    if not isinstance(request.html, str) or not request.html:
        raise ValidationError("Invalid html payload")
    require_dimensions(request.width, request.height)

    logger.info(
        "[render] Request %dx%d @ scale %s, %d chars",
        request.width, request.height, request.device_scale_factor, len(request.html),
    )

    try:
        result = await run_in_threadpool(
            capture_html,
            request.html,
            width=request.width,
            height=request.height,
            device_scale_factor=request.device_scale_factor,
        )
    except Exception as e:
        logger.error("[render] Capture error: %s", e, exc_info=True)
        raise ProcessingError("Capture failed", include_stack=True) from e

    logger.info("[render] Capture successful, sending %d bytes", len(result.png))
    return Response(
        content=result.png,
        media_type="image/png",
        headers={
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Content-Length": str(len(result.png)),
            "X-Success": "true",
            "X-Processing-Time": processing_time_header(result.elapsed_seconds),
        },
    )


@router.get("/health", response_model=RenderHealthResponse, tags=["health"])
async def health_check():
    """Service health check endpoint."""
    return RenderHealthResponse(
        environment=get_settings().app_env,
        uptime=uptime_seconds(),
        timestamp=utc_timestamp(),
    )
