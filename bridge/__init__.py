"""CAST AI MCP Bridge."""
