"""Shared fixtures: point the stub at the sample schema and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from chaski.config import StubConfig
from chaski.pytest_plugin import chaski_environment, stub_api  # noqa: F401

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def chaski_config() -> StubConfig:
    return StubConfig(
        spec_path=DATA_DIR / "openapi.json",
        fixtures_path=DATA_DIR / "fixtures.json",
        api_base="https://api.example.com",
        connect_base="https://connect.example.com",
    )
