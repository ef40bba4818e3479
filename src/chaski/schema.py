"""OpenAPI 2 schema layer.

Just enough of an OpenAPI 2 reader to drive the stub: find the operation
for a method and path, hand out the schema of its success response, and
build a skeleton response from that schema. It does not validate request
parameters or bodies.

Schema nodes are wrapped in ``SchemaFragment`` and ``$ref`` pointers are
resolved on access, so recursive definitions (a customer whose sources
list points back at customers) never have to be expanded in full.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from chaski.errors import SchemaError

logger = logging.getLogger("chaski")

RESOURCE_ID_KEY = "x-resourceId"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")

_TYPE_DEFAULTS: dict[str, Any] = {
    "string": "",
    "integer": 0,
    "number": 0.0,
    "boolean": False,
}

_PATH_PARAM = re.compile(r"\{([^}/]+)\}")


class SchemaFragment:
    """A schema node of an OpenAPI document with ``$ref`` resolved."""

    def __init__(self, data: Mapping[str, Any], document: SchemaDocument):
        self._ref = data.get("$ref")
        self.data = document.resolve_ref(self._ref) if self._ref else data
        self._document = document

    @property
    def resource_id(self) -> str | None:
        return self.data.get(RESOURCE_ID_KEY)

    @property
    def declared_properties(self) -> frozenset[str]:
        return frozenset(self.data.get("properties") or {})

    def property_schema(self, name: str) -> SchemaFragment | None:
        prop = (self.data.get("properties") or {}).get(name)
        if prop is None:
            return None
        return SchemaFragment(prop, self._document)

    @property
    def items(self) -> SchemaFragment | None:
        items = self.data.get("items")
        if not isinstance(items, Mapping):
            return None
        return SchemaFragment(items, self._document)

    @property
    def item_schema(self) -> SchemaFragment | None:
        """Schema of the elements of a list envelope's ``data`` property."""
        data = self.property_schema("data")
        if data is None:
            return None
        return data.items

    def skeleton(self) -> Any:
        """Build a placeholder value shaped like this schema."""
        return self._skeleton(frozenset())

    def _skeleton(self, seen: frozenset[str]) -> Any:
        if self._ref:
            if self._ref in seen:
                return None
            seen = seen | {self._ref}

        if "example" in self.data:
            return self.data["example"]
        if "default" in self.data:
            return self.data["default"]
        if self.data.get("enum"):
            return self.data["enum"][0]

        schema_type = self.data.get("type")
        if isinstance(schema_type, list):
            schema_type = next((t for t in schema_type if t != "null"), None)

        if schema_type == "array":
            return []
        if schema_type == "object" or "properties" in self.data:
            return {
                name: self.property_schema(name)._skeleton(seen)
                for name in self.data.get("properties") or {}
            }
        return _TYPE_DEFAULTS.get(schema_type)

    def __repr__(self) -> str:
        return f"SchemaFragment(resource_id={self.resource_id!r})"


@dataclass(frozen=True)
class Operation:
    """One method on one path template of the API."""

    method: str
    path: str
    status_code: int
    response_schema: SchemaFragment | None
    pattern: re.Pattern = field(repr=False)
    param_count: int = 0

    def match(self, path: str) -> dict[str, str] | None:
        m = self.pattern.match(path)
        if m is None:
            return None
        return m.groupdict()


class SchemaDocument:
    """A parsed OpenAPI 2 document. Read-only once constructed."""

    def __init__(self, data: Mapping[str, Any]):
        if not isinstance(data, Mapping) or "paths" not in data:
            raise SchemaError("schema document has no 'paths'")
        self.data = data
        self.base_path = (data.get("basePath") or "").rstrip("/")
        self.operations = self._build_operations()

    @classmethod
    def from_file(cls, path: Path) -> SchemaDocument:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"{path}: invalid JSON ({exc})") from exc
        document = cls(data)
        logger.info(
            "Loaded API schema from %s (%d operations)", path, len(document.operations)
        )
        return document

    def resolve_ref(self, ref: str) -> Mapping[str, Any]:
        """Follow a local ``#/...`` JSON pointer, including chained refs."""
        seen: set[str] = set()
        node: Any = {"$ref": ref}
        while isinstance(node, Mapping) and "$ref" in node:
            ref = node["$ref"]
            if ref in seen:
                raise SchemaError(f"circular $ref: {ref}")
            seen.add(ref)
            if not ref.startswith("#/"):
                raise SchemaError(f"unsupported $ref: {ref}")
            node = self.data
            for part in ref[2:].split("/"):
                part = part.replace("~1", "/").replace("~0", "~")
                if not isinstance(node, Mapping) or part not in node:
                    raise SchemaError(f"unresolvable $ref: {ref}")
                node = node[part]
        if not isinstance(node, Mapping):
            raise SchemaError(f"$ref does not point at a schema: {ref}")
        return node

    def fragment(self, data: Mapping[str, Any]) -> SchemaFragment:
        return SchemaFragment(data, self)

    def match(self, method: str, path: str) -> tuple[Operation, dict[str, str]] | None:
        """Find the operation for a request, preferring literal path segments."""
        method = method.lower()
        for operation in self.operations:
            if operation.method != method:
                continue
            params = operation.match(path)
            if params is not None:
                return operation, params
        return None

    def _build_operations(self) -> list[Operation]:
        operations = []
        for template, path_item in self.data["paths"].items():
            pattern, param_count = _compile_path(self.base_path + template)
            for method in HTTP_METHODS:
                spec = path_item.get(method)
                if spec is None:
                    continue
                status_code, schema = self._success_response(spec)
                operations.append(
                    Operation(
                        method=method,
                        path=template,
                        status_code=status_code,
                        response_schema=schema,
                        pattern=pattern,
                        param_count=param_count,
                    )
                )
        operations.sort(key=lambda op: op.param_count)
        return operations

    def _success_response(
        self, spec: Mapping[str, Any]
    ) -> tuple[int, SchemaFragment | None]:
        responses = spec.get("responses") or {}
        for code in sorted(c for c in responses if str(c).startswith("2")):
            response = responses[code]
            if "$ref" in response:
                response = self.resolve_ref(response["$ref"])
            schema = response.get("schema")
            return int(code), self.fragment(schema) if schema else None
        return 200, None


def _compile_path(template: str) -> tuple[re.Pattern, int]:
    parts = _PATH_PARAM.split(template)
    regex = []
    for i, part in enumerate(parts):
        if i % 2:
            regex.append(f"(?P<{_group_name(part)}>[^/]+)")
        else:
            regex.append(re.escape(part))
    return re.compile("^" + "".join(regex) + "/?$"), len(parts) // 2


def _group_name(param: str) -> str:
    name = re.sub(r"\W", "_", param)
    if not name or name[0].isdigit():
        name = "_" + name
    return name


def load_schema(path: Path) -> SchemaDocument:
    return SchemaDocument.from_file(path)
