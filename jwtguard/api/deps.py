"""FastAPI dependency injection for Bearer JWT verification."""

from collections.abc import Awaitable, Callable, Sequence
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from jwtguard.core.errors import ErrorKind, UnauthorizedError
from jwtguard.core.settings import GuardSettings
from jwtguard.crypto.types import TokenClaims
from jwtguard.jwks.cache import JWKSCache
from jwtguard.token.verifier import verify_jwt

_security = HTTPBearer(auto_error=False)


class VerifiedToken(BaseModel):
    """A raw Bearer token together with its verified claims."""

    token: str
    claims: TokenClaims


def _load_settings() -> GuardSettings:
    return GuardSettings()


def get_jwks_cache(request: Request) -> JWKSCache:
    """The process-wide key set cache built by the application lifespan."""
    return request.app.state.jwks_cache


def require_jwt(
    role_groups: Sequence[Sequence[str]] | None = None,
) -> Callable[..., Awaitable[VerifiedToken]]:
    """Build a dependency that verifies the Bearer JWT of a request.

    ``role_groups`` overrides the configured ``JWT_ROLE_GROUPS``; pass an
    empty list to accept any role.
    """

    async def _verify_bearer(
        credentials: Annotated[
            HTTPAuthorizationCredentials | None, Depends(_security)
        ],
        cache: Annotated[JWKSCache, Depends(get_jwks_cache)],
        settings: Annotated[GuardSettings, Depends(_load_settings)],
    ) -> VerifiedToken:
        if credentials is None:
            raise UnauthorizedError("missing bearer token", ErrorKind.MISSING_TOKEN)
        claims = await verify_jwt(
            credentials.credentials,
            cache,
            settings.claims_policy(role_groups),
            timeout=settings.fetch_timeout,
        )
        return VerifiedToken(token=credentials.credentials, claims=claims)

    return _verify_bearer
