"""
Proxy Routes - CAST AI Request Forwarding
=========================================

This module turns the declarative route table into FastAPI endpoints that
forward requests to the CAST AI API.

Flow per request:
-----------------
1. Extract the API key (X-CastAI-API-Key > X-API-Key > Authorization: Bearer)
2. Re-read path parameters from the raw request path and substitute them
   into the upstream template
3. Forward the declared query parameters that are present
4. Relay the upstream JSON body with status 200, or raise UpstreamError

Endpoints:
----------
- One endpoint per RouteDescriptor in route_table.ROUTES
- GET /security/overview: four upstream calls merged into one payload
"""

import asyncio
import inspect
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status
from fastapi.responses import JSONResponse

from ..errors import RelayError
from ..models import ErrorResponse
from .auth import get_api_key
from .client import BODY_METHODS, UpstreamClient
from .route_table import ROUTES, SECURITY_OVERVIEW_PATHS, RouteDescriptor, resolve_route

logger = logging.getLogger(__name__)

# Create router
proxy_router = APIRouter(
    responses={"default": {"model": ErrorResponse, "description": "Upstream or local error"}}
)


# ============================================================================
# Dependencies
# ============================================================================

def get_upstream_client(request: Request) -> UpstreamClient:
    """
    Dependency to get the upstream client from app state.

    Args:
        request: FastAPI request object

    Returns:
        UpstreamClient bound to the configured CAST AI base URL
    """
    client = getattr(request.app.state, "upstream_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upstream client not initialized"
        )
    return client


def resolve_path_values(request: Request, descriptor: RouteDescriptor):
    """
    Pick the route and path values from the raw request path.

    The router only sees the decoded path, so ``/clusters/a%2Fb/nodes`` and
    ``/clusters/a/b/nodes`` reach the same endpoint; the raw path tells them
    apart.

    Raises:
        HTTPException: 404 when the raw path matches no route
    """
    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        return descriptor, request.path_params

    raw = raw_path.split(b"?", 1)[0].decode("utf-8", errors="replace")
    resolved = resolve_route(descriptor.method, raw)
    if resolved is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return resolved


async def read_json_body(request: Request) -> Any:
    """Return the parsed JSON body, or None when the request has no body."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return await request.json()
    except ValueError as e:
        raise RelayError(
            "Request body is not valid JSON",
            status_code=status.HTTP_400_BAD_REQUEST
        ) from e


# ============================================================================
# Endpoint Factory
# ============================================================================

def _endpoint_signature(descriptor: RouteDescriptor) -> inspect.Signature:
    """
    Signature FastAPI inspects for the generated endpoint.

    Declaring path and query parameters here only documents them in
    /docs; the endpoint itself reads them from the request.
    """
    kind = inspect.Parameter.KEYWORD_ONLY
    parameters = [
        inspect.Parameter(
            "request",
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            annotation=Request
        ),
        inspect.Parameter(
            "api_key", kind, default=Depends(get_api_key), annotation=Optional[str]
        ),
        inspect.Parameter(
            "upstream", kind, default=Depends(get_upstream_client), annotation=UpstreamClient
        ),
    ]
    for name in descriptor.path_params:
        parameters.append(
            inspect.Parameter(name, kind, default=Path(...), annotation=str)
        )
    for name in descriptor.query_params:
        parameters.append(
            inspect.Parameter(name, kind, default=Query(None), annotation=Optional[str])
        )
    return inspect.Signature(parameters)


def make_forwarding_endpoint(descriptor: RouteDescriptor):
    """
    Build the FastAPI endpoint for one route descriptor.

    Args:
        descriptor: Static route description

    Returns:
        Async endpoint callable
    """

    async def endpoint(
        request: Request,
        *,
        api_key: Optional[str],
        upstream: UpstreamClient,
        **_declared: Any
    ) -> JSONResponse:
        route, path_values = resolve_path_values(request, descriptor)
        upstream_path = route.build_upstream_path(path_values)
        query = {
            name: request.query_params[name]
            for name in route.query_params
            if request.query_params.get(name)
        }
        body = None
        if route.method in BODY_METHODS:
            body = await read_json_body(request)

        data = await upstream.request(
            route.method,
            upstream_path,
            api_key=api_key,
            query=query,
            body=body
        )
        return JSONResponse(content=data)

    endpoint.__name__ = descriptor.name
    endpoint.__signature__ = _endpoint_signature(descriptor)
    return endpoint


# Routes ending in a parameter go last so their ``:path`` convertor does not
# shadow the longer routes that share their prefix.
for _descriptor in sorted(ROUTES, key=lambda r: r.path.endswith("}")):
    proxy_router.add_api_route(
        _descriptor.route_path,
        make_forwarding_endpoint(_descriptor),
        methods=[_descriptor.method],
        name=_descriptor.name,
        summary=_descriptor.summary or None,
        tags=[_descriptor.tag],
        response_class=JSONResponse,
    )


# ============================================================================
# Aggregate Endpoint
# ============================================================================

@proxy_router.get(
    "/security/overview",
    tags=["Security"],
    summary="Security overview (vulnerabilities, best practices, attack paths, image security)"
)
async def security_overview(
    api_key: Optional[str] = Depends(get_api_key),
    upstream: UpstreamClient = Depends(get_upstream_client)
) -> Dict[str, Any]:
    """
    Fetch the four security overview reports in parallel.

    All four must succeed; the first failure is raised and the other
    results are discarded.
    """
    keys = list(SECURITY_OVERVIEW_PATHS)
    results = await asyncio.gather(*(
        upstream.get(SECURITY_OVERVIEW_PATHS[key], api_key=api_key)
        for key in keys
    ))
    return dict(zip(keys, results))
