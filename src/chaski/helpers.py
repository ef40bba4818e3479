"""Test helpers — clients bound to the stubbed API.

``stub_api()`` returns an httpx-compatible client whose requests never
leave the process: everything under the API base URL is answered by the
stub, optionally through the test's own override routes.

    router = APIRouter()

    @router.post("/v1/charges")
    def create_charge(exchange: StubExchange = Depends(get_exchange)):
        with exchange.modify_generated_response() as charge:
            charge["amount"] = 500

    client = stub_api(router)
    assert client.post("/v1/charges").json()["amount"] == 500
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.testclient import TestClient

from chaski.app import create_connect_app, create_stub_app
from chaski.config import StubConfig, load_config
from chaski.environment import StubEnvironment, load_environment


def stub_api(
    override: APIRouter | None = None,
    *,
    environment: StubEnvironment | None = None,
    config: StubConfig | None = None,
) -> TestClient:
    """Client for the stubbed API, answering through ``override`` if given."""
    if config is None:
        config = load_config()
    if environment is None:
        environment = load_environment(config)
    app = create_stub_app(environment, override, raise_errors=True)
    return TestClient(app, base_url=config.api_base)


def stub_connect(config: StubConfig | None = None) -> TestClient:
    """Client for the connect host; every request answers ``{}``."""
    if config is None:
        config = load_config()
    return TestClient(create_connect_app(), base_url=config.connect_base)
