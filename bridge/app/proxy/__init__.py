"""
Proxy Package
=============

This package implements the endpoints that forward requests from the local
bridge surface to the CAST AI API.

Main Components:
----------------
- route_table.py: Declarative local-to-upstream route descriptors
- auth.py: API key extraction (X-CastAI-API-Key > X-API-Key > Bearer)
- client.py: UpstreamClient, one outbound call with error normalization
- routes.py: FastAPI router generated from the route table

Usage:
------
    from bridge.app.proxy import proxy_router
    app.include_router(proxy_router)
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
