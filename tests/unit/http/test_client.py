"""Tests for the JSON request client."""

import logging

import httpx
import pytest

from jwtguard.http.client import RequestClient, TransportError

BASE_URL = "https://issuer.example/pool/"


def _client(handler, **kwargs: object) -> RequestClient:
    return RequestClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


class TestGetJSON:
    """Tests for RequestClient.get_json."""

    async def test_parses_success_body(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"keys": []})

        async with _client(handler) as client:
            result = await client.get_json("/.well-known/jwks.json")
        assert result.status_code == 200
        assert result.body == {"keys": []}
        assert seen == ["https://issuer.example/pool/.well-known/jwks.json"]

    async def test_error_status_body_not_parsed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="<html>down</html>")

        async with _client(handler) as client:
            result = await client.get_json("/x")
        assert result.status_code == 503
        assert result.body is None

    async def test_empty_success_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        async with _client(handler) as client:
            result = await client.get_json("/x")
        assert result.status_code == 204
        assert result.body is None

    async def test_invalid_json_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="{not json")

        async with _client(handler) as client:
            with pytest.raises(TransportError, match="invalid JSON"):
                await client.get_json("/x")

    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(TransportError, match="connection refused"):
                await client.get_json("/x")

    async def test_trace_logs_response(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"keys": []})

        with caplog.at_level(logging.DEBUG, logger="jwtguard.http.client"):
            async with _client(handler, trace=True) as client:
                await client.get_json("/x")
        assert "GET https://issuer.example/pool/x" in caplog.text
        assert "<< 200" in caplog.text
        assert '"keys": []' in caplog.text

    async def test_no_trace_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        with caplog.at_level(logging.DEBUG, logger="jwtguard.http.client"):
            async with _client(handler) as client:
                await client.get_json("/x")
        assert "<< 200" not in caplog.text
