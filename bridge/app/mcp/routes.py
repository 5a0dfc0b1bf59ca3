"""
MCP Discovery Routes (placeholders)
===================================

These endpoints sketch the surface of a future MCP server integration
(list specs, list endpoints, endpoint details, search, execute). None of
them call CAST AI: each returns a fixed or lightly parameterized payload.

They are tagged "MCP (placeholder)" in the generated OpenAPI schema so
clients can tell them apart from forwarding routes.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query

from ..models import EndpointDetailsRequest, ExecuteRequest

logger = logging.getLogger(__name__)

PLACEHOLDER_TAG = "MCP (placeholder)"

mcp_router = APIRouter(prefix="/mcp", tags=[PLACEHOLDER_TAG])


# ============================================================================
# Static Payloads
# ============================================================================

API_SPECS: List[Dict[str, str]] = [
    {"title": "CAST.AI API documentation", "description": "Main platform API"},
    {"title": "AI Enabler", "description": "AI/ML model hosting"},
    {"title": "Cluster Autoscaler", "description": "Lifecycle management"},
    {"title": "Inventory", "description": "Asset discovery"},
    {"title": "Omni provisioner", "description": "Edge computing"},
    {"title": "Patching Engine", "description": "Workload mutations"},
    {"title": "Pricing", "description": "Cost management"},
]

API_ENDPOINTS: Dict[str, Dict[str, str]] = {
    "/v1/organizations": {
        "get": "List user organizations",
        "post": "Creates an organization",
    },
    "/v1/kubernetes/external-clusters": {
        "get": "Lists clusters",
        "post": "Registers new external cluster",
    },
}


# ============================================================================
# Endpoints
# ============================================================================

@mcp_router.get("/specs")
async def list_specs() -> List[Dict[str, str]]:
    """List the API specifications an MCP server would expose."""
    logger.debug("Serving placeholder response for /mcp/specs")
    return API_SPECS


@mcp_router.get("/endpoints")
async def list_endpoints(
    title: Optional[str] = Query(None, description="Specification title")
) -> Dict[str, Dict[str, str]]:
    # Same listing for every title until a real MCP server backs this.
    logger.debug(f"Serving placeholder response for /mcp/endpoints (title={title})")
    return API_ENDPOINTS


@mcp_router.post("/endpoint-details")
async def endpoint_details(payload: EndpointDetailsRequest) -> Dict[str, Any]:
    """Describe a single operation; echoes the requested path and method."""
    logger.debug("Serving placeholder response for /mcp/endpoint-details")
    return {
        "path": payload.path,
        "method": payload.method,
        "description": "Endpoint details would be returned here",
        "parameters": [],
        "responses": {},
    }


@mcp_router.get("/search")
async def search_specs(
    pattern: Optional[str] = Query(None, description="Search pattern")
) -> Dict[str, Any]:
    logger.debug("Serving placeholder response for /mcp/search")
    return {
        "pattern": pattern,
        "results": {
            "paths": [],
            "operations": [],
            "components": [],
        },
    }


@mcp_router.post("/execute")
async def execute_request(payload: ExecuteRequest) -> Dict[str, str]:
    """Accept an execute request without performing it."""
    logger.info(
        "Placeholder /mcp/execute called; request not forwarded",
        extra={"method": payload.method, "url": payload.url}
    )
    return {"message": "MCP execute request would be processed here"}
