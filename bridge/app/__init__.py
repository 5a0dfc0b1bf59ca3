"""
Bridge Application Package

FastAPI service exposing a stable local JSON surface over a subset of the
CAST AI REST API.

Modules:
- main: Application factory, lifespan, health and OpenAPI document routes
- config: Environment-driven settings
- errors: Error types and the single error-to-HTTP boundary
- models: Pydantic request/response models
- proxy: Forwarding routes generated from the route table
- mcp: Placeholder MCP discovery routes (not forwarded)
"""
