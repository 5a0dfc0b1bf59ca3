"""
Shared fixtures for bridge tests.

The upstream CAST AI API is stubbed with respx; every test gets an app
built from explicit Settings rather than the environment.
"""

import pytest
import respx
from fastapi.testclient import TestClient

from bridge.app.config import Settings
from bridge.app.main import create_app

UPSTREAM_BASE = "https://castai.test"


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a fake upstream and a temp OpenAPI path"""
    return Settings(
        _env_file=None,
        CASTAI_API_BASE=UPSTREAM_BASE,
        OPENAPI_SPEC_PATH=str(tmp_path / "openapi-spec.yaml"),
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def app(test_settings):
    """
    Create test FastAPI application.

    The lifespan opens the upstream httpx client when a TestClient enters
    and closes it on exit; respx intercepts it like any other client.
    """
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Create test client"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def upstream():
    """Stubbed CAST AI API; unmatched outbound calls fail the test"""
    with respx.mock(base_url=UPSTREAM_BASE, assert_all_called=False) as mock:
        yield mock
