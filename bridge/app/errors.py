"""
Error Types and the HTTP Error Boundary
=======================================

Every failure in the bridge is raised as one of the exceptions below and
translated into a JSON response in exactly one place,
``register_exception_handlers``.

Error envelope:
    {"error": "<message>", "details": <optional payload>,
     "path": "/clusters/abc", "method": "GET"}

Taxonomy:
    - UpstreamError : transport failure or non-2xx response from CAST AI
    - NotFoundError : a local resource (the OpenAPI document) is missing
    - anything else : unhandled, rendered as 500 "Internal Server Error"
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================

class RelayError(Exception):
    """
    Base class for errors that carry their own HTTP status.

    Attributes:
        status_code: HTTP status returned to the caller
        message: Human-readable message placed in the ``error`` field
        details: Optional payload (usually the upstream response body)
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class UpstreamError(RelayError):
    """The upstream call failed at the transport level or returned non-2xx."""


class NotFoundError(RelayError):
    """A local resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


# ============================================================================
# Response Rendering
# ============================================================================

def error_body(
    request: Request,
    message: str,
    details: Any = None
) -> Dict[str, Any]:
    """
    Build the error envelope for a request.

    ``details`` is left out entirely when there is nothing to report.
    """
    body: Dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    body["path"] = request.url.path
    body["method"] = request.method
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the single error-to-HTTP boundary on the application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        logger.error(
            f"Error: {exc.message}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": exc.status_code,
                "exception_type": type(exc).__name__
            }
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, exc.message, exc.details)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        logger.warning(
            f"HTTP {exc.status_code}: {exc.detail}",
            extra={"path": request.url.path, "method": request.method}
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, str(exc.detail)),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "Request validation failed",
            extra={"path": request.url.path, "method": request.method}
        )
        return JSONResponse(
            status_code=422,
            content=error_body(request, "Invalid request", jsonable_encoder(exc.errors()))
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(request, "Internal Server Error")
        )
