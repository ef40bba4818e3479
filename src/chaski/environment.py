"""Process-wide stub environment — the API schema and the fixture library.

Both are loaded once per configuration and never written afterwards, so a
single environment is shared by every stub a test run creates.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from chaski.config import StubConfig
from chaski.fixtures import FixtureStore
from chaski.schema import SchemaDocument


@dataclass(frozen=True)
class StubEnvironment:
    schema: SchemaDocument
    fixtures: FixtureStore


@functools.lru_cache(maxsize=None)
def load_environment(config: StubConfig) -> StubEnvironment:
    """Load the schema and fixtures named by ``config``, once per config."""
    return StubEnvironment(
        schema=SchemaDocument.from_file(config.spec_path),
        fixtures=FixtureStore.from_file(config.fixtures_path),
    )
