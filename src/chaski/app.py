"""Chaski — FastAPI stub of a remote API.

The runner who answers in the remote API's place. Requests are matched
against the API schema, answered with fixture data, and handed to an
override router that may edit or replace the answer.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chaski.config import StubConfig, load_config
from chaski.environment import StubEnvironment, load_environment
from chaski.errors import FixtureNotFoundError
from chaski.exchange import StubExchange
from chaski.resolver import resolve

logger = logging.getLogger("chaski")
audit_logger = logging.getLogger("chaski.audit")


def create_stub_app(
    environment: StubEnvironment,
    override: APIRouter | None = None,
    raise_errors: bool = False,
) -> FastAPI:
    """Build a stub app for ``environment``.

    ``override`` holds the test's own routes. Without one, an empty router
    is used and every request is answered with its generated response.

    A fixture miss answers 500 with the missing resource in the body. With
    ``raise_errors`` it is raised instead, so a TestClient hands it straight
    to the test.
    """
    app = FastAPI(
        title="Chaski",
        description="Schema-driven API stub",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.environment = environment

    # ── Exception handlers ────────────────────────────────────

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code != 404:
            return PlainTextResponse(str(exc.detail), status_code=exc.status_code)
        return PlainTextResponse(
            f"endpoint not found in API stub: {request.method} {request.url.path}",
            status_code=404,
        )

    # ── Stub middleware ───────────────────────────────────────

    @app.middleware("http")
    async def stub_response(request: Request, call_next):
        start = time.monotonic()
        matched = environment.schema.match(request.method, request.url.path)
        if matched is None:
            audit_logger.info(
                "%s %s 404 (undefined route)", request.method, request.url.path
            )
            return JSONResponse(
                status_code=404,
                content={
                    "error": {
                        "type": "invalid_request_error",
                        "message": (
                            "That request method and path combination isn't "
                            f"defined: {request.method} {request.url.path}"
                        ),
                    }
                },
            )
        operation, _ = matched

        generated = None
        if operation.response_schema is not None:
            try:
                generated = resolve(operation.response_schema, environment.fixtures)
            except FixtureNotFoundError as exc:
                logger.warning("%s %s: %s", request.method, operation.path, exc)
                if raise_errors:
                    raise
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": {
                            "type": "fixture_not_found",
                            "message": str(exc),
                            "resource_id": exc.resource_id,
                            "is_list_context": exc.is_list_context,
                        }
                    },
                )

        exchange = StubExchange(generated)
        request.state.exchange = exchange
        response = await call_next(request)

        if not exchange.suppressed:
            response = JSONResponse(
                status_code=operation.status_code,
                content=exchange.generated_response(),
            )

        audit_logger.info(
            "%s %s %d %.3fs%s",
            request.method,
            request.url.path,
            response.status_code,
            time.monotonic() - start,
            " (overridden)" if exchange.suppressed else "",
        )
        return response

    # ── Routers ───────────────────────────────────────────────

    if override is None:
        override = APIRouter()
    app.include_router(override)

    return app


def create_connect_app() -> FastAPI:
    """Stub for the OAuth/connect host: every request gets an empty object."""
    app = FastAPI(title="Chaski Connect")

    @app.api_route(
        "/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    )
    async def empty(path: str):
        return {}

    return app


def create_app(config: StubConfig | None = None) -> FastAPI:
    """Application factory for serving the stub."""
    if config is None:
        config = load_config()

    environment = load_environment(config)
    app = create_stub_app(environment)
    app.state.config = config
    logger.info("Chaski stub ready for %s", config.api_base)
    return app
