"""
FastAPI application entry point for the multi-purpose API
(background removal + simple HTML render).
"""

import uvicorn

from .config import get_settings
from .factory import create_app
from .api.routes import router


settings = get_settings()

app = create_app(
    title="Render & Background Removal API",
    description="Removes image backgrounds and renders HTML snippets to PNG.",
    routers=[router],
)


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
    )
