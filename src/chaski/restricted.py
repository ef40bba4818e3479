"""Restricted view over a generated response.

A dict-like wrapper that refuses to read or write any key the response did
not already have when it was wrapped. Override handlers edit generated
responses through it, so a typo or a field the schema never declared fails
loudly instead of quietly producing a response the real API would never
send.

Keys are normalized to strings (enum members by their value), so
``view["amount"]`` and ``view[Field.AMOUNT]`` address the same entry.

Nested mappings, including mappings inside lists, are wrapped eagerly at
construction and whenever one is assigned, so the restriction holds at
every depth. ``unwrap()`` turns the whole tree back into plain dicts and
lists.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from chaski.errors import InvalidMergeTargetError, UndefinedKeyError


def _normalize_key(key: Any) -> str:
    if isinstance(key, Enum):
        key = key.value
    return str(key)


def _wrap(value: Any) -> Any:
    if isinstance(value, RestrictedView):
        return value
    if isinstance(value, Mapping):
        return RestrictedView(value)
    if isinstance(value, list):
        return [_wrap(v) for v in value]
    return value


def _unwrap(value: Any) -> Any:
    if isinstance(value, RestrictedView):
        return value.unwrap()
    if isinstance(value, list):
        return [_unwrap(v) for v in value]
    return value


class RestrictedView:
    """Key-restricted wrapper with deep merge.

    Every accessor takes ``allow_undefined_keys``; passing True is the one
    way to introduce a key the response did not have. Keys added that way
    are visible to later calls on the same view.
    """

    def __init__(self, mapping: Mapping[Any, Any]):
        self._data: dict[str, Any] = {
            _normalize_key(k): _wrap(v) for k, v in mapping.items()
        }

    def get(self, key: Any, allow_undefined_keys: bool = False) -> Any:
        key = _normalize_key(key)
        if not allow_undefined_keys:
            self._check_key(key)
        return self._data.get(key)

    def set(self, key: Any, value: Any, allow_undefined_keys: bool = False) -> None:
        key = _normalize_key(key)
        if not allow_undefined_keys:
            self._check_key(key)
        self._data[key] = _wrap(value)

    def deep_merge(
        self, source: Mapping[Any, Any], allow_undefined_keys: bool = False
    ) -> None:
        """Merge ``source`` into this view, recursing into nested mappings.

        A mapping in ``source`` can only be merged onto a value that is
        itself a mapping. Under ``allow_undefined_keys`` such a value is
        replaced wholesale instead, and missing keys are created. Nested
        merges into existing mappings are always strict.
        """
        for key, value in source.items():
            key = _normalize_key(key)
            if isinstance(value, Mapping) and not isinstance(value, RestrictedView):
                current = self._data.get(key)
                if not isinstance(current, RestrictedView):
                    if not allow_undefined_keys:
                        raise InvalidMergeTargetError(key)
                    self.set(key, value, allow_undefined_keys=True)
                    continue
                nested = self.get(key, allow_undefined_keys=allow_undefined_keys)
                nested.deep_merge(value)
            else:
                self.set(key, value, allow_undefined_keys=allow_undefined_keys)

    def unwrap(self) -> dict[str, Any]:
        """Return the current state as plain nested dicts and lists."""
        return {k: _unwrap(v) for k, v in self._data.items()}

    def keys(self):
        return self._data.keys()

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return _normalize_key(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RestrictedView({self.unwrap()!r})"

    def _check_key(self, key: str) -> None:
        if key not in self._data:
            raise UndefinedKeyError(key)
