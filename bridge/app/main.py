"""
FastAPI Bridge Application Factory
==================================

This is the main entry point for the bridge service that sits between
MCP / AI-agent tooling and the CAST AI REST API.

Architecture:
    Agent tooling → Bridge (this service) → CAST AI API

Routers:
    - /organizations, /clusters/*, /organization/*, /security/*
                    : Forwarded to CAST AI (see proxy/route_table.py)
    - /mcp/*        : Placeholder MCP discovery endpoints (never forwarded)
    - /health       : Health check endpoint
    - /openapi.json : The bridge's OpenAPI document, served from disk

Environment Variables:
    - PORT: Listening port (default: 3000)
    - HOST: Bind address (default: 0.0.0.0)
    - CASTAI_API_BASE: CAST AI API base URL (default: https://api.cast.ai)
    - OPENAPI_SPEC_PATH: Document served at /openapi.json (default: openapi-spec.yaml)
    - ALLOWED_ORIGINS: Comma-separated CORS origins (default: *)
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn bridge.app.main:app --reload --port 3000

    Production:
        python -m bridge.app.main
        castai-bridge
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .errors import NotFoundError, register_exception_handlers
from .mcp import mcp_router
from .models import HealthResponse
from .proxy import proxy_router
from .proxy.client import UpstreamClient

SERVICE_VERSION = "1.0.0"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(
        level=level,
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Configure logging at the configured level
        - Create the shared httpx.AsyncClient used for all upstream calls
        - Log service startup information

    Shutdown tasks:
        - Close the shared HTTP client
    """
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("bridge.main")

    http_client: Optional[httpx.AsyncClient] = None
    if getattr(app.state, "upstream_client", None) is None:
        http_client = httpx.AsyncClient(follow_redirects=True)
        app.state.upstream_client = UpstreamClient(http_client, settings.CASTAI_API_BASE)

    logger.info(
        f"CAST AI MCP Bridge running on port {settings.PORT}",
        extra={
            "castai_base": settings.CASTAI_API_BASE,
            "openapi_spec": settings.OPENAPI_SPEC_PATH,
            "log_level": settings.LOG_LEVEL
        }
    )

    yield

    logger.info("Shutting down bridge service")
    if http_client is not None:
        await http_client.aclose()
        app.state.upstream_client = None
    logger.info("Bridge service shutdown complete")


# Create FastAPI application
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS, security header and access log middleware
        - Route handlers
        - Exception handlers

    Args:
        settings: Configuration to use; loaded from the environment if omitted

    Returns:
        FastAPI: Configured application instance
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="CAST AI MCP Bridge",
        description="Local JSON surface over a subset of the CAST AI API",
        version=SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        # /openapi.json serves the on-disk document
        openapi_url="/docs/openapi.json"
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    access_logger = logging.getLogger("bridge.access")

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        """Log one line per request and attach security headers."""
        started = time.perf_counter()
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        duration_ms = (time.perf_counter() - started) * 1000
        client_host = request.client.host if request.client else "-"
        access_logger.info(
            f'{client_host} "{request.method} {request.url.path}" '
            f'{response.status_code} {duration_ms:.1f}ms'
        )
        return response

    register_exception_handlers(app)

    # Forwarding routes, then placeholders
    app.include_router(proxy_router)
    app.include_router(mcp_router)

    # Health check endpoint
    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """
        Health check endpoint.

        Never calls upstream, so it reports ok whether or not CAST AI is
        reachable.
        """
        return HealthResponse(castaiBase=request.app.state.settings.CASTAI_API_BASE)

    # Serve OpenAPI spec
    @app.get("/openapi.json", tags=["System"])
    def openapi_document(request: Request) -> Response:
        """
        Serve the bridge's OpenAPI document from disk.

        Raises:
            NotFoundError: If the document cannot be read
        """
        spec_path = Path(request.app.state.settings.OPENAPI_SPEC_PATH)
        try:
            content = spec_path.read_text(encoding="utf-8")
        except OSError as e:
            raise NotFoundError("OpenAPI spec not found") from e
        return Response(content=content, media_type="text/yaml")

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Run the bridge with uvicorn on the configured host and port."""
    settings = get_settings()

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
