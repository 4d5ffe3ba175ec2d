"""
FastAPI route definitions for the multi-purpose API.

- POST /api/remove-background — multipart `image` -> transparent PNG
- POST /api/render            — JSON {html, width, height} -> PNG
- GET  /api/health            — liveness + uptime
- GET  /                      — endpoint overview

Concurrency:
- Blocking work (rembg inference, sync Playwright) is offloaded to the
  thread pool via run_in_threadpool; handlers share no mutable state.
"""

import time
import logging

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from .common import processing_time_header, require_dimensions, uptime_seconds, utc_timestamp
from .schemas import HealthResponse, ServiceInfoResponse, SimpleRenderRequest
from ..errors import ProcessingError, ValidationError
from ..util.cutout import remove_background
from ..util.renderer import render_html_simple
from ..util.uploads import read_upload, remove_quietly, save_upload

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Background removal
# ---------------------------------------------------------------------------

@router.post("/api/remove-background", tags=["background-removal"])
async def remove_background_endpoint(image: UploadFile | None = File(default=None)):
    """
    Remove the background of an uploaded JPEG / PNG / WEBP image.

    The upload is spooled to the upload directory and deleted afterwards,
    whether processing succeeds or fails.
    """
    uploaded = await save_upload(image)
    try:
        logger.info(
            "[cutout] Received %s (%.2f KB, %s)",
            uploaded.original_name, uploaded.size / 1024, uploaded.mime_type,
        )
        image_bytes = await run_in_threadpool(read_upload, uploaded)

        start = time.perf_counter()
        png = await run_in_threadpool(remove_background, image_bytes)
        elapsed = time.perf_counter() - start
    except Exception as e:
        logger.error("[cutout] Background removal error: %s", e, exc_info=True)
        raise ProcessingError(
            "Background removal failed. Please try with a different image."
        ) from e
    finally:
        remove_quietly(uploaded.path)

    return Response(
        content=png,
        media_type="image/png",
        headers={"X-Processing-Time": processing_time_header(elapsed)},
    )


# ---------------------------------------------------------------------------
# HTML render (simple variant)
# ---------------------------------------------------------------------------

@router.post("/api/render", tags=["render"])
async def render_endpoint(request: SimpleRenderRequest):
    """Render HTML to a viewport-sized PNG."""
    if not isinstance(request.html, str) or not request.html:
        raise ValidationError("HTML content is required")
    require_dimensions(request.width, request.height)

    try:
        result = await run_in_threadpool(
            render_html_simple, request.html, width=request.width, height=request.height,
        )
    except Exception as e:
        logger.error("[renderer] Render error: %s", e, exc_info=True)
        raise ProcessingError("Rendering failed") from e

    return Response(
        content=result.png,
        media_type="image/png",
        headers={"X-Processing-Time": processing_time_header(result.elapsed_seconds)},
    )


# ---------------------------------------------------------------------------
# Health & info
# ---------------------------------------------------------------------------

@router.get("/api/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Service health check endpoint."""
    return HealthResponse(uptime=uptime_seconds(), timestamp=utc_timestamp())


@router.get("/", response_model=ServiceInfoResponse, tags=["health"])
async def service_info():
    """Describe the available endpoints."""
    return ServiceInfoResponse(
        name="Render & Background Removal API",
        version="1.0.0",
        endpoints={
            "health": "GET /api/health",
            "removeBackground": "POST /api/remove-background (multipart/form-data)",
            "renderHTML": "POST /api/render (JSON body with html, width, height)",
        },
        examples={
            "backgroundRemoval": (
                'curl -X POST -F "image=@image.jpg" '
                "http://localhost:5000/api/remove-background --output result.png"
            ),
            "htmlRender": (
                "curl -X POST -H \"Content-Type: application/json\" "
                "-d '{\"html\":\"<h1>Hello</h1>\"}' "
                "http://localhost:5000/api/render --output render.png"
            ),
        },
    )
