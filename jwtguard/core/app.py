"""FastAPI application factory for the JWT guard service."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from jwtguard.api.routes_token import router as token_router
from jwtguard.core.errors import KeySetFetchError, VerificationError
from jwtguard.core.settings import GuardSettings
from jwtguard.http.client import RequestClient
from jwtguard.jwks.cache import JWKSCache

logger = logging.getLogger(__name__)


async def _verification_error_handler(
    _request: Request, exc: Exception
) -> JSONResponse:
    assert isinstance(exc, VerificationError)
    return JSONResponse({"error": exc.reason}, status_code=exc.status_code)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = GuardSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with RequestClient(
            settings.key_set_base_url,
            timeout=settings.fetch_timeout,
            keep_alive=settings.http_keep_alive,
            trace=settings.http_trace,
        ) as http_client:
            cache = JWKSCache(http_client)
            try:
                await cache.fetch(timeout=settings.fetch_timeout)
            except KeySetFetchError as exc:
                # keys are fetched again on the first unknown kid
                logger.warning("Initial JWKS fetch failed: %s", exc)
            app.state.jwks_cache = cache
            yield

    app = FastAPI(
        title="JWT Guard",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(VerificationError, _verification_error_handler)
    app.include_router(token_router)

    return app
