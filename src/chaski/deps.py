"""FastAPI dependencies for override routes."""

from __future__ import annotations

from fastapi import Request

from chaski.exchange import StubExchange


def get_exchange(request: Request) -> StubExchange:
    """Get the stub exchange the pipeline attached to this request."""
    return request.state.exchange
