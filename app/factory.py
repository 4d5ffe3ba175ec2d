"""
FastAPI application factory shared by both services.

Wires logging, the lifespan hooks, CORS, the request body ceiling and the
error handlers around a set of routers.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .config import get_settings
from .errors import register_error_handlers

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


class BodySizeLimitMiddleware:
    """
    Enforce a request body ceiling on the bytes actually received.

    A declared Content-Length over the limit is rejected up front; chunked
    bodies are counted as they stream in and the response is replaced with
    a 413 once the running total passes the limit.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size) -> None:
        logger.warning(
            "Rejected %s %s: body of %s bytes exceeds %d",
            scope.get("method"), scope.get("path"), size, self.max_body_bytes,
        )
        response = JSONResponse(status_code=413, content={"error": "Request body too large"})
        await response(scope, receive, send)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_body_bytes:
            await self._reject(scope, receive, send, declared)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    exceeded = True
                    raise HTTPException(status_code=413, detail="Request body too large")
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if exceeded:
                # Whatever the app answers, the caller gets the 413.
                if message["type"] == "http.response.start" and not response_started:
                    response_started = True
                    await self._reject(scope, receive, send, received)
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception:
            if not exceeded or response_started:
                raise
            await self._reject(scope, receive, send, received)


def create_app(
    title: str,
    description: str,
    routers: list[APIRouter],
    mount_fonts: bool = False,
) -> FastAPI:
    """Build a configured FastAPI application around ``routers``."""
    settings = get_settings()
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup / shutdown hooks."""
        logger.info("%s starting up (env=%s) ...", title, settings.app_env)
        yield
        logger.info("%s shutting down ...", title)

    app = FastAPI(
        title=title,
        description=description,
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)

    for router in routers:
        app.include_router(router)

    if mount_fonts and os.path.isdir(settings.fonts_dir):
        app.mount("/fonts", StaticFiles(directory=settings.fonts_dir), name="fonts")
        logger.info("Serving local fonts from %s", settings.fonts_dir)

    return app
