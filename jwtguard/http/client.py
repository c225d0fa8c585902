"""Minimal JSON-over-HTTP client used to fetch key sets."""

import json
import logging
import time
from typing import Any, Protocol, Self

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
SUCCESS_STATUSES = frozenset({200, 201, 202, 204})


class TransportError(Exception):
    """The HTTP exchange failed before a usable response was read."""


class ResponseData(BaseModel):
    """Status code and parsed JSON body of a response."""

    status_code: int
    body: Any = None


class JSONGetter(Protocol):
    """Anything that can GET a path and return its JSON response."""

    async def get_json(self, path: str) -> ResponseData: ...


def _pretty(body: bytes) -> str:
    try:
        return json.dumps(json.loads(body), indent=2)
    except ValueError:
        return body.decode(errors="replace")


class RequestClient:
    """Thin wrapper over ``httpx.AsyncClient`` bound to a base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        keep_alive: bool = True,
        trace: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        limits = httpx.Limits(max_keepalive_connections=None if keep_alive else 0)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            limits=limits,
            transport=transport,
        )
        self._trace = trace

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str) -> ResponseData:
        """GET ``path``; the body is parsed as JSON only for success statuses."""
        request = self._client.build_request("GET", path)
        if self._trace:
            logger.debug("GET %s", request.url)
        start = time.monotonic()
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {path}: {exc}") from exc

        if self._trace:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.debug(
                "<< %d %dms %s",
                response.status_code,
                elapsed_ms,
                _pretty(response.content),
            )

        if response.status_code not in SUCCESS_STATUSES:
            return ResponseData(status_code=response.status_code)
        if not response.content:
            return ResponseData(status_code=response.status_code)
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(f"GET {path}: invalid JSON body") from exc
        return ResponseData(status_code=response.status_code, body=body)
