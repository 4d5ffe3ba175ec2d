"""
Error taxonomy and the FastAPI handlers that turn it into JSON responses.

- ValidationError: missing / invalid client input  -> 400
- ProcessingError: external library, network or browser failure -> 500

Nothing propagates past the handler boundary; callers get a human-readable
``error`` message, plus ``details`` / ``stack`` outside production.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors reported to HTTP callers."""

    status_code = 500

    def __init__(self, message: str, *, include_stack: bool = False):
        super().__init__(message)
        self.message = message
        self.include_stack = include_stack


class ValidationError(ServiceError):
    status_code = 400


class ProcessingError(ServiceError):
    """Failure inside an external capability; the original error is ``__cause__``."""

    status_code = 500


def error_body(exc: ServiceError) -> dict:
    """Build the JSON body for a ServiceError, honoring the production flag."""
    body: dict = {"error": exc.message}
    if exc.status_code < 500:
        return body

    if get_settings().is_production:
        return body

    cause = exc.__cause__
    if cause is not None:
        body["details"] = str(cause)
        if exc.include_stack:
            body["stack"] = "".join(
                traceback.format_exception(type(cause), cause, cause.__traceback__)
            )
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Attach the ServiceError / request-validation handlers to an app."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request",
                "details": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                    for e in exc.errors()
                ],
            },
        )
