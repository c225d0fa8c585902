"""Shared test fixtures for jwt-guard."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from support import (
    CLIENT_ID,
    ISSUER,
    KeyPair,
    StaticKeySource,
    generate_keypair,
    jwks_body,
)

from jwtguard.api.deps import get_jwks_cache
from jwtguard.core.app import create_app
from jwtguard.jwks.cache import JWKSCache


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for test settings."""
    monkeypatch.setenv("JWT_ISSUER", ISSUER)
    monkeypatch.setenv("JWT_CLIENT_IDS", CLIENT_ID)
    monkeypatch.setenv("JWT_TOKEN_USE", "access")
    monkeypatch.delenv("JWT_ROLE_GROUPS", raising=False)
    monkeypatch.delenv("JWT_JWKS_BASE_URL", raising=False)


@pytest.fixture(scope="session")
def keypairs() -> list[KeyPair]:
    """Three RSA-2048 key pairs, generated once per session."""
    return [generate_keypair() for _ in range(3)]


@pytest.fixture
def keypair(keypairs: list[KeyPair]) -> KeyPair:
    return keypairs[0]


@pytest.fixture
async def loaded_cache(keypair: KeyPair) -> JWKSCache:
    """A cache that has fetched a key set publishing ``keypair``."""
    cache = JWKSCache(StaticKeySource.serving(jwks_body(keypair)))
    await cache.fetch()
    return cache


@pytest.fixture
async def client(loaded_cache: JWKSCache) -> AsyncIterator[AsyncClient]:
    """Create an httpx test client with the key set cache overridden."""
    app = create_app()
    app.dependency_overrides[get_jwks_cache] = lambda: loaded_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
