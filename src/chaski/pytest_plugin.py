"""pytest plugin exposing the stub to test suites.

Registered through the ``pytest11`` entry point. The schema and fixtures
are loaded once per session; each test builds its own stub clients.

    def test_refund(stub_api):
        client = stub_api()
        assert client.post("/v1/refunds").status_code == 200
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient

from chaski import helpers
from chaski.config import StubConfig, load_config
from chaski.environment import StubEnvironment, load_environment


@pytest.fixture(scope="session")
def chaski_config() -> StubConfig:
    return load_config()


@pytest.fixture(scope="session")
def chaski_environment(chaski_config: StubConfig) -> StubEnvironment:
    return load_environment(chaski_config)


@pytest.fixture
def stub_api(
    chaski_config: StubConfig, chaski_environment: StubEnvironment
) -> Callable[[APIRouter | None], TestClient]:
    """Factory for stub clients; pass an APIRouter to override routes."""

    def _stub_api(override: APIRouter | None = None) -> TestClient:
        return helpers.stub_api(
            override, environment=chaski_environment, config=chaski_config
        )

    return _stub_api
