"""Errors raised by the Chaski stub.

None of these are recoverable inside the stub. Each one points at a test
authoring mistake or a fixture library that has drifted from the schema,
so they propagate straight back to the test that made the request.
"""

from __future__ import annotations


class ChaskiError(Exception):
    """Base class for all stub errors."""


class SchemaError(ChaskiError):
    """The API schema document is malformed or references something missing."""


class FixtureFileError(ChaskiError):
    """The fixture file is not a JSON object of resource payloads."""


class FixtureNotFoundError(ChaskiError, LookupError):
    """No fixture satisfies the response schema of the requested endpoint."""

    def __init__(self, resource_id: str, is_list_context: bool = False):
        self.resource_id = resource_id
        self.is_list_context = is_list_context
        if is_list_context:
            message = f"no suitable fixture for list resource: {resource_id}"
        else:
            message = f"no fixture for: {resource_id}"
        super().__init__(message)


class UndefinedKeyError(ChaskiError, KeyError):
    """A key that the generated response never had was read or written."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"'{self.key}' is not defined in stub response"


class InvalidMergeTargetError(ChaskiError, ValueError):
    """A mapping was deep merged onto a value that is not a mapping."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"'{key}' in stub response is not a hash and cannot be deep merged"
        )
