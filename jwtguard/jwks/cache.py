"""JWKS cache: fetches a signer's key set and serves keys by key id."""

import asyncio
import logging
from collections.abc import Mapping
from types import MappingProxyType

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from pydantic import ValidationError

from jwtguard.core.errors import JWKDecodeError, KeySetFetchError
from jwtguard.crypto.keys import decode_rsa_key
from jwtguard.crypto.types import JWKSDocument
from jwtguard.http.client import JSONGetter, TransportError
from jwtguard.jwks.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

JWKS_PATH = "/.well-known/jwks.json"
HTTP_OK = 200


def build_key_set(document: JWKSDocument) -> dict[str, RSAPublicKey]:
    """Decode every RSA key of a document, skipping the ones that fail."""
    keys: dict[str, RSAPublicKey] = {}
    for jwk in document.keys:
        if jwk.kty != "RSA":
            logger.debug("Skipping JWK %r of type %r", jwk.kid, jwk.kty)
            continue
        try:
            keys[jwk.kid] = decode_rsa_key(jwk)
        except JWKDecodeError as exc:
            logger.warning("Skipping undecodable JWK: %s", exc)
    return keys


class JWKSCache:
    """Key id to RSA public key mapping, replaced wholesale on each fetch.

    ``lookup`` never fetches; the caller decides when a refresh is due.
    The network call of ``fetch`` runs outside the lock, only the swap of
    the mapping is exclusive.
    """

    def __init__(self, source: JSONGetter, path: str = JWKS_PATH) -> None:
        self._source = source
        self._path = path
        self._lock = ReadWriteLock()
        self._keys: Mapping[str, RSAPublicKey] = MappingProxyType({})

    async def fetch(self, timeout: float | None = None) -> None:
        """Fetch the key set and atomically replace the cached mapping."""
        try:
            async with asyncio.timeout(timeout):
                response = await self._source.get_json(self._path)
        except TimeoutError as exc:
            raise KeySetFetchError("JWKS fetch: deadline exceeded") from exc
        except TransportError as exc:
            raise KeySetFetchError(f"JWKS fetch: {exc}") from exc

        if response.status_code != HTTP_OK:
            raise KeySetFetchError(
                f"JWKS fetch: expected {HTTP_OK}, got {response.status_code}"
            )
        try:
            document = JWKSDocument.model_validate(response.body)
        except ValidationError as exc:
            raise KeySetFetchError("JWKS fetch: invalid key set document") from exc

        keys = build_key_set(document)
        if not keys:
            raise KeySetFetchError("JWKS fetch: empty key set")

        with self._lock.write():
            self._keys = MappingProxyType(keys)
        logger.info("JWKS refreshed with key ids %s", sorted(keys))

    def lookup(self, kid: str) -> tuple[RSAPublicKey | None, bool]:
        """Return the key for ``kid`` and whether it was found."""
        with self._lock.read():
            key = self._keys.get(kid)
        return key, key is not None

    def snapshot(self) -> Mapping[str, RSAPublicKey]:
        """Read-only view of the current key set generation."""
        with self._lock.read():
            return self._keys

    @property
    def kids(self) -> list[str]:
        return sorted(self.snapshot())
