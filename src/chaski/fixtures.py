"""Fixture store — canned example payloads keyed by resource identifier.

Loaded once, read-only afterwards. Lookups hand out deep copies, so a
caller editing its payload never changes what later lookups see.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from chaski.errors import FixtureFileError

logger = logging.getLogger("chaski")


class FixtureStore:
    """Immutable mapping from resource identifier to example payload."""

    def __init__(self, fixtures: Mapping[str, dict[str, Any]]):
        self._fixtures = MappingProxyType(copy.deepcopy(dict(fixtures)))

    @classmethod
    def from_file(cls, path: Path) -> FixtureStore:
        """Load fixtures from a JSON file of ``{resource_id: payload}``."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise FixtureFileError(f"{path}: invalid JSON ({exc})") from exc

        if not isinstance(data, dict):
            raise FixtureFileError(f"{path}: expected an object of fixtures")
        for resource_id, payload in data.items():
            if not isinstance(payload, dict):
                raise FixtureFileError(
                    f"{path}: fixture '{resource_id}' is not an object"
                )

        logger.info("Loaded %d fixtures from %s", len(data), path)
        return cls(data)

    def lookup(self, resource_id: str) -> dict[str, Any] | None:
        """Return a copy of the fixture for ``resource_id``, or None if there is none."""
        data = self._fixtures.get(resource_id)
        if data is None:
            return None
        return copy.deepcopy(data)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._fixtures

    def __iter__(self) -> Iterator[str]:
        return iter(self._fixtures)

    def __len__(self) -> int:
        return len(self._fixtures)


def load_fixtures(path: Path) -> FixtureStore:
    return FixtureStore.from_file(path)
