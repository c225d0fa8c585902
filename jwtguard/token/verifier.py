"""RS256 JWT verification against a JWKS cache and a claims policy."""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from jwtguard.core.errors import (
    ErrorKind,
    KeySetFetchError,
    SignatureError,
    TokenFormatError,
    UnauthorizedError,
    VerificationError,
)
from jwtguard.crypto.signature import signing_input, verify_rs256
from jwtguard.crypto.types import TokenClaims
from jwtguard.jwks.cache import JWKSCache
from jwtguard.token.parser import decode_claims, decode_header, split_token
from jwtguard.token.policy import ClaimsPolicy, check_claims

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHM = "RS256"


async def resolve_key(
    cache: JWKSCache, kid: str, timeout: float | None = None
) -> RSAPublicKey:
    """Look up ``kid``, refetching the key set once on a miss."""
    key, found = cache.lookup(kid)
    if found and key is not None:
        return key
    # the signer may have rotated its keys since the last fetch
    try:
        await cache.fetch(timeout=timeout)
    except KeySetFetchError as exc:
        raise UnauthorizedError(str(exc), ErrorKind.KEY_FETCH) from exc
    key, found = cache.lookup(kid)
    if not found or key is None:
        raise UnauthorizedError("JWKS kid is not found", ErrorKind.KEY_NOT_FOUND)
    return key


async def verify_jwt(
    token: str,
    cache: JWKSCache,
    policy: ClaimsPolicy,
    *,
    timeout: float | None = None,
    now: datetime | None = None,
) -> TokenClaims:
    """Verify a compact RS256 JWT and return its claims.

    Raises ``UnauthorizedError`` or ``ForbiddenError``; there is no partial
    success.
    """
    try:
        claims = await _verify(token, cache, policy, timeout=timeout, now=now)
    except VerificationError as exc:
        logger.debug("JWT rejected (%s): %s", exc.kind, exc.reason)
        raise
    return claims


async def _verify(
    token: str,
    cache: JWKSCache,
    policy: ClaimsPolicy,
    *,
    timeout: float | None,
    now: datetime | None,
) -> TokenClaims:
    try:
        header64, claims64, signature64 = split_token(token)
        header = decode_header(header64)
    except TokenFormatError as exc:
        raise UnauthorizedError(str(exc), ErrorKind.MALFORMED) from exc
    if header.alg != SUPPORTED_ALGORITHM:
        raise UnauthorizedError(
            "unsupported JWT signature algorithm", ErrorKind.ALGORITHM
        )

    key = await resolve_key(cache, header.kid, timeout=timeout)

    try:
        claims = decode_claims(claims64)
    except TokenFormatError as exc:
        raise UnauthorizedError(str(exc), ErrorKind.MALFORMED) from exc
    try:
        verify_rs256(signing_input(header64, claims64), signature64, key)
    except SignatureError as exc:
        raise UnauthorizedError(str(exc), ErrorKind.SIGNATURE) from exc

    check_claims(claims, policy, now=now)
    return claims


async def assert_jwt(
    token: str,
    cache: JWKSCache,
    issuer: str,
    token_use: str,
    client_ids: Iterable[str],
    role_groups: Sequence[Sequence[str]] = (),
    *,
    timeout: float | None = None,
    now: datetime | None = None,
) -> TokenClaims:
    """Verify a token against policy values given one by one."""
    policy = ClaimsPolicy(
        issuer=issuer,
        token_use=token_use,
        client_ids=frozenset(client_ids),
        role_groups=tuple(tuple(group) for group in role_groups),
    )
    return await verify_jwt(token, cache, policy, timeout=timeout, now=now)
