"""
MCP Package
===========

Placeholder MCP discovery endpoints (/mcp/*). These routes never forward
to CAST AI; they return static payloads describing the intended surface.

Usage:
------
    from bridge.app.mcp import mcp_router
    app.include_router(mcp_router)
"""

from .routes import mcp_router

__all__ = ["mcp_router"]
