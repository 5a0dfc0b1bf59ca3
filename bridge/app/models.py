"""
Data Models Module

This module defines Pydantic models for request/response validation
and data serialization throughout the bridge service.

Models are organized by functional area:
- System models (health check, error envelope)
- MCP placeholder models (request bodies of the non-forwarding /mcp routes)
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# System Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(default="ok", description="Service health status")
    timestamp: datetime = Field(default_factory=utc_now, description="Check timestamp (UTC)")
    castaiBase: str = Field(..., description="Configured CAST AI API base URL")


class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="Error message")
    details: Optional[Any] = Field(None, description="Upstream error payload, when available")
    path: str = Field(..., description="Request path that failed")
    method: str = Field(..., description="Request method that failed")


# ============================================================================
# MCP Placeholder Models
# ============================================================================

class EndpointDetailsRequest(BaseModel):
    """Request body for POST /mcp/endpoint-details."""
    path: Optional[str] = Field(None, description="API path, e.g. /v1/organizations")
    method: Optional[str] = Field(None, description="HTTP method of the operation")
    title: Optional[str] = Field(None, description="Title of the API specification")


class ExecuteRequest(BaseModel):
    """Request body for POST /mcp/execute."""
    method: Optional[str] = Field(None, description="HTTP method to execute")
    url: Optional[str] = Field(None, description="Target URL")
    headers: Optional[Dict[str, str]] = Field(None, description="Request headers")
    queryString: Optional[Dict[str, Any]] = Field(None, description="Query parameters")
    postData: Optional[Any] = Field(None, description="Request body")
    title: Optional[str] = Field(None, description="Title of the API specification")
