"""Per-request exchange between the stub pipeline and override handlers.

The stub attaches one ``StubExchange`` to each request before the override
router runs. Override handlers reach it through ``chaski.deps.get_exchange``
and may read the generated response, edit it through a ``RestrictedView``,
or suppress it and answer the request themselves.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from chaski.restricted import RestrictedView


class StubExchange:
    """Generated response slot plus the suppression flag for one request."""

    def __init__(self, generated: dict[str, Any] | None = None):
        self._generated = generated
        self.suppressed = False

    def generated_response(self) -> dict[str, Any] | None:
        """The response built from the schema and fixtures for this route.

        None when the schema has no opinion about the route.
        """
        return self._generated

    @contextmanager
    def modify_generated_response(self) -> Iterator[RestrictedView]:
        """Edit the generated response under the restricted-key guard.

            with exchange.modify_generated_response() as response:
                response["amount"] = 500
                response["metadata"].set("order_id", "6735", allow_undefined_keys=True)

        Changes are committed when the block exits normally. If the block
        raises, the generated response is left as it was. An absent response
        stays absent unless the block adds keys to it.
        """
        view = RestrictedView(copy.deepcopy(self._generated or {}))
        yield view
        if self._generated is None and not len(view):
            return
        self._generated = view.unwrap()

    def suppress_generated_response(self) -> None:
        """Answer this request from the override handler, not the generated response."""
        self.suppressed = True
