"""
Pydantic schemas for API request / response models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Render schemas
# ---------------------------------------------------------------------------

class SimpleRenderRequest(BaseModel):
    """Body of POST /api/render."""
    # Left untyped: emptiness is checked in the route to return 400, not 422.
    html: Any = Field(default=None, description="HTML document to render")
    width: int = Field(default=1200, gt=0, description="Viewport width in px")
    height: int = Field(default=630, gt=0, description="Viewport height in px")


class EnhancedRenderRequest(BaseModel):
    """Body of POST /render."""
    model_config = ConfigDict(populate_by_name=True)

    html: Any = Field(default=None, description="HTML document to render")
    width: int = Field(default=1200, gt=0)
    height: int = Field(default=800, gt=0)
    device_scale_factor: float = Field(default=2, gt=0, le=4, alias="deviceScaleFactor")


# ---------------------------------------------------------------------------
# Health / info
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    """Health check response for the multi-purpose API."""
    status: str = "ok"
    message: str = "API is running"
    uptime: float
    timestamp: str = Field(..., description="ISO 8601 UTC timestamp")
    features: list[str] = ["background-removal", "html-render"]


class RenderHealthResponse(BaseModel):
    """Health check response for the enhanced render API."""
    status: str = "OK"
    environment: str
    uptime: float
    timestamp: str = Field(..., description="ISO 8601 UTC timestamp")


class ServiceInfoResponse(BaseModel):
    """Static description of the available endpoints."""
    name: str
    version: str
    endpoints: dict[str, str]
    examples: dict[str, str]
