"""
Unit Tests for System Endpoints
================================

Tests for the routes defined in bridge/app/main.py

Test Coverage:
--------------
1. /health returns ok, a timestamp and the configured base URL
2. /health never depends on upstream reachability
3. /openapi.json serves the on-disk document, 404 envelope when missing
4. Unknown routes use the JSON error envelope
5. Security headers on every response
6. Lifespan applies LOG_LEVEL and closes the upstream client

Run tests:
----------
    pytest bridge/app/tests/test_system.py -v
"""

import logging
from datetime import datetime

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from bridge.app.config import Settings
from bridge.app.main import create_app

from .conftest import UPSTREAM_BASE


SPEC_YAML = """openapi: 3.0.3
info:
  title: CAST AI MCP Bridge
  version: 1.0.0
paths: {}
"""


# ============================================================================
# Health Tests
# ============================================================================

def test_health_returns_ok(client):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["status"] == "ok"
    assert body["castaiBase"] == UPSTREAM_BASE

    timestamp = datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
    assert timestamp.tzinfo is not None


def test_health_does_not_call_upstream(client, upstream):
    """Test that health succeeds even when every upstream call would fail"""
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert len(upstream.calls) == 0


# ============================================================================
# OpenAPI Document Tests
# ============================================================================

def test_openapi_document_served_from_disk(client, test_settings):
    with open(test_settings.OPENAPI_SPEC_PATH, "w", encoding="utf-8") as f:
        f.write(SPEC_YAML)

    response = client.get("/openapi.json")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/yaml")
    assert response.text == SPEC_YAML


def test_openapi_document_missing_returns_404(client):
    response = client.get("/openapi.json")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {
        "error": "OpenAPI spec not found",
        "path": "/openapi.json",
        "method": "GET",
    }


def test_generated_schema_moved_under_docs(client):
    response = client.get("/docs/openapi.json")

    assert response.status_code == status.HTTP_200_OK
    schema = response.json()
    assert "/clusters/{clusterId}/cost-report" in schema["paths"]
    assert "/security/images/{tagId}/vulnerabilities" in schema["paths"]
    assert "/security/overview" in schema["paths"]


# ============================================================================
# Error Envelope / Headers
# ============================================================================

def test_unknown_route_uses_error_envelope(client):
    response = client.get("/does-not-exist")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {
        "error": "Not Found",
        "path": "/does-not-exist",
        "method": "GET",
    }


def test_security_headers_present(client):
    response = client.get("/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert response.headers["Referrer-Policy"] == "no-referrer"


# ============================================================================
# Lifespan Tests
# ============================================================================

@pytest.mark.parametrize("level", ["WARNING", "DEBUG"])
def test_lifespan_applies_log_level(level):
    root = logging.getLogger()
    previous = root.level
    settings = Settings(_env_file=None, CASTAI_API_BASE=UPSTREAM_BASE, LOG_LEVEL=level)

    try:
        with TestClient(create_app(settings)):
            assert root.level == getattr(logging, level)
            assert logging.getLogger("bridge.access").isEnabledFor(logging.INFO) == (
                level == "DEBUG"
            )
    finally:
        root.setLevel(previous)


def test_lifespan_closes_upstream_client(app):
    with TestClient(app):
        http_client = app.state.upstream_client._http
        assert not http_client.is_closed

    assert http_client.is_closed
    assert app.state.upstream_client is None
