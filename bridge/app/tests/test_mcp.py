"""
Unit Tests for MCP Placeholder Routes
======================================

Tests for bridge/app/mcp/routes.py

Every test runs with the upstream stub active and no routes registered,
so any outbound call would fail the test.
"""

from fastapi import status


def test_list_specs(client, upstream):
    response = client.get("/mcp/specs")

    assert response.status_code == status.HTTP_200_OK
    specs = response.json()
    assert len(specs) == 7
    assert specs[0] == {"title": "CAST.AI API documentation", "description": "Main platform API"}
    assert len(upstream.calls) == 0


def test_list_endpoints_ignores_title(client, upstream):
    with_title = client.get("/mcp/endpoints", params={"title": "Pricing"})
    without_title = client.get("/mcp/endpoints")

    assert with_title.status_code == status.HTTP_200_OK
    assert with_title.json() == without_title.json()
    assert "/v1/organizations" in with_title.json()
    assert len(upstream.calls) == 0


def test_endpoint_details_echoes_path_and_method(client, upstream):
    response = client.post(
        "/mcp/endpoint-details",
        json={"path": "/v1/organizations", "method": "get", "title": "CAST.AI API documentation"}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "path": "/v1/organizations",
        "method": "get",
        "description": "Endpoint details would be returned here",
        "parameters": [],
        "responses": {},
    }
    assert len(upstream.calls) == 0


def test_search_echoes_pattern(client, upstream):
    response = client.get("/mcp/search", params={"pattern": "cluster"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "pattern": "cluster",
        "results": {"paths": [], "operations": [], "components": []},
    }


def test_execute_does_not_forward(client, upstream):
    response = client.post(
        "/mcp/execute",
        json={
            "method": "GET",
            "url": "https://api.cast.ai/v1/organizations",
            "headers": {"X-API-Key": "k"},
            "title": "CAST.AI API documentation",
        }
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "MCP execute request would be processed here"}
    assert len(upstream.calls) == 0


def test_placeholder_routes_are_tagged(client):
    schema = client.get("/docs/openapi.json").json()

    assert schema["paths"]["/mcp/execute"]["post"]["tags"] == ["MCP (placeholder)"]
    assert schema["paths"]["/mcp/specs"]["get"]["tags"] == ["MCP (placeholder)"]
