"""Key pairs, key set documents, token minting and a fake key set source."""

import asyncio
import base64
import json
import time
from typing import Any, NamedTuple

import jwt
import uuid_utils
from cryptography.hazmat.primitives.asymmetric import rsa

from jwtguard.crypto.keys import public_key_to_jwk
from jwtguard.http.client import ResponseData

ISSUER = "https://issuer.example"
CLIENT_ID = "client-1"
RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
HOUR = 3600


class KeyPair(NamedTuple):
    """A signer's RSA key pair and the key id it publishes."""

    kid: str
    private_key: rsa.RSAPrivateKey

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self.private_key.public_key()


def generate_keypair() -> KeyPair:
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    return KeyPair(kid=str(uuid_utils.uuid7()), private_key=private_key)


def jwks_body(*pairs: KeyPair, extra: tuple[dict[str, Any], ...] = ()) -> dict:
    """JWKS document publishing the public halves of ``pairs``."""
    keys = [public_key_to_jwk(p.public_key, p.kid).model_dump() for p in pairs]
    return {"keys": [*keys, *extra]}


def access_claims(**overrides: Any) -> dict[str, Any]:
    claims: dict[str, Any] = {
        "iss": ISSUER,
        "token_use": "access",
        "client_id": CLIENT_ID,
        "exp": int(time.time()) + HOUR,
        "cognito:groups": [],
        "email": "alice@example.com",
    }
    claims.update(overrides)
    return claims


def id_claims(**overrides: Any) -> dict[str, Any]:
    claims: dict[str, Any] = {
        "iss": ISSUER,
        "token_use": "id",
        "aud": CLIENT_ID,
        "exp": int(time.time()) + HOUR,
        "email": "alice@example.com",
    }
    claims.update(overrides)
    return claims


def mint_token(pair: KeyPair, claims: dict[str, Any], kid: str | None = None) -> str:
    """Sign ``claims`` with RS256, publishing ``kid`` (default: the pair's)."""
    return jwt.encode(
        claims,
        pair.private_key,
        algorithm="RS256",
        headers={"kid": kid or pair.kid},
    )


def segment(value: dict[str, Any] | bytes) -> str:
    """Unpadded base64url encoding of JSON or raw bytes."""
    raw = value if isinstance(value, bytes) else json.dumps(value).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


class StaticKeySource:
    """Replays canned responses; the last one repeats once exhausted."""

    def __init__(self, *responses: ResponseData, delay: float = 0.0) -> None:
        self.responses = list(responses)
        self.paths: list[str] = []
        self.delay = delay

    @classmethod
    def serving(cls, *bodies: dict) -> "StaticKeySource":
        return cls(*(ResponseData(status_code=200, body=b) for b in bodies))

    @property
    def calls(self) -> int:
        return len(self.paths)

    async def get_json(self, path: str) -> ResponseData:
        index = min(len(self.paths), len(self.responses) - 1)
        self.paths.append(path)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.responses[index]
