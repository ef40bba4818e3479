"""Response resolver — turn an endpoint's response schema into a body.

A schema that names a resource with ``x-resourceId`` is answered with a
copy of that resource's fixture. A schema that looks like a list envelope
is answered with the envelope, its ``data`` holding one copy of the item
resource's fixture. Anything else is a fixture library that has fallen
behind the schema, and fails.
"""

from __future__ import annotations

import copy
from typing import Any

from chaski.errors import FixtureNotFoundError
from chaski.fixtures import FixtureStore
from chaski.schema import SchemaFragment

# Property names alone decide list-ness; their types are not inspected.
LIST_PROPERTIES = frozenset({"has_more", "data", "url"})


def is_list_envelope(fragment: SchemaFragment) -> bool:
    return LIST_PROPERTIES <= fragment.declared_properties


def resolve(
    fragment: SchemaFragment,
    fixtures: FixtureStore,
    generated: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the generated response for ``fragment`` from ``fixtures``.

    ``generated`` is the envelope the schema layer already produced for a
    list response. When omitted, the fragment's skeleton is used.

    Raises FixtureNotFoundError when neither the resource nor, for list
    envelopes, the item resource has a fixture.
    """
    resource_id = fragment.resource_id or ""
    data = fixtures.lookup(resource_id)
    if data is not None:
        return data

    if not is_list_envelope(fragment):
        raise FixtureNotFoundError(resource_id, is_list_context=False)

    item_schema = fragment.item_schema
    item_id = (item_schema.resource_id if item_schema else None) or ""
    data = fixtures.lookup(item_id)
    if data is None:
        raise FixtureNotFoundError(item_id, is_list_context=True)

    if generated is None:
        generated = fragment.skeleton()
    envelope = copy.deepcopy(generated) if isinstance(generated, dict) else {}
    envelope["data"] = [data]
    return envelope
