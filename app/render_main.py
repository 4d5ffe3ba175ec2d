"""
FastAPI application entry point for the enhanced render API.
"""

import uvicorn

from .config import get_settings
from .factory import create_app
from .api.render_routes import router


settings = get_settings()

app = create_app(
    title="Enhanced Render API",
    description="Renders HTML to PNG with font inlining and a bounded stabilization wait.",
    routers=[router],
    mount_fonts=True,
)


if __name__ == "__main__":
    uvicorn.run(
        "app.render_main:app",
        host=settings.app_host,
        port=settings.render_app_port,
        reload=False,
    )
