"""Configuration for the Chaski stub.

Reads from config/chaski.ini if present, environment variables override.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_CONFIG_FILE = _PROJECT_ROOT / "config" / "chaski.ini"


@dataclass(frozen=True)
class StubConfig:
    """Stub configuration. Immutable once loaded."""

    spec_path: Path = _PROJECT_ROOT / "spec" / "spec.json"
    fixtures_path: Path = _PROJECT_ROOT / "spec" / "fixtures.json"
    api_base: str = "https://api.example.com"
    connect_base: str = "https://connect.example.com"
    host: str = "127.0.0.1"
    port: int = 12111


_PATH_KEYS = {"spec_path", "fixtures_path"}


def _coerce(config_key: str, val: str):
    if config_key == "port":
        return int(val)
    if config_key in _PATH_KEYS:
        return Path(val)
    return val


def load_config(config_path: Path | None = None) -> StubConfig:
    """Load config from INI file, then override with environment variables."""
    path = config_path or _CONFIG_FILE
    kwargs: dict = {}

    if path.exists():
        parser = configparser.ConfigParser()
        parser.read(path)
        if parser.has_section("stub"):
            for ini_key, config_key in [
                ("spec", "spec_path"),
                ("fixtures", "fixtures_path"),
                ("api_base", "api_base"),
                ("connect_base", "connect_base"),
            ]:
                val = parser.get("stub", ini_key, fallback=None)
                if val is not None:
                    kwargs[config_key] = _coerce(config_key, val)
        if parser.has_section("server"):
            for ini_key, config_key in [
                ("host", "host"),
                ("port", "port"),
            ]:
                val = parser.get("server", ini_key, fallback=None)
                if val is not None:
                    kwargs[config_key] = _coerce(config_key, val)

    env_map = {
        "CHASKI_SPEC_PATH": "spec_path",
        "CHASKI_FIXTURES_PATH": "fixtures_path",
        "CHASKI_API_BASE": "api_base",
        "CHASKI_CONNECT_BASE": "connect_base",
        "CHASKI_HOST": "host",
        "CHASKI_PORT": "port",
    }
    for env_key, config_key in env_map.items():
        val = os.getenv(env_key)
        if val is not None:
            kwargs[config_key] = _coerce(config_key, val)

    return StubConfig(**kwargs)
