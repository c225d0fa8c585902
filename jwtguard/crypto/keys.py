"""Conversion between RSA JSON Web Keys and cryptography public keys."""

import base64
import re

from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from jwtguard.core.errors import JWKDecodeError
from jwtguard.crypto.types import JsonWebKey

MAX_EXPONENT = 0xFFFFFFFF

_BASE64URL_RE = re.compile(r"^[A-Za-z0-9_-]*$")


def b64url_decode(value: str) -> bytes:
    """Decode unpadded base64url, rejecting padding and foreign characters."""
    if not _BASE64URL_RE.match(value):
        raise ValueError("invalid base64url alphabet")
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode())


def int_to_base64url(value: int) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def decode_exponent(raw: bytes) -> int:
    """Interpret JWK exponent bytes as an unsigned 32-bit integer.

    Three-byte exponents (``AQAB``) are widened with a leading zero byte;
    every length is read big-endian and must fit in 32 bits.
    """
    if len(raw) == 3:
        raw = b"\x00" + raw
    exponent = int.from_bytes(raw, byteorder="big")
    if exponent > MAX_EXPONENT:
        raise JWKDecodeError("JWK exponent too large")
    return exponent


def decode_rsa_key(jwk: JsonWebKey) -> RSAPublicKey:
    """Build an RSA public key from the ``n`` and ``e`` members of a JWK."""
    try:
        modulus = int.from_bytes(b64url_decode(jwk.n), byteorder="big")
    except ValueError as exc:
        raise JWKDecodeError(f"JWK {jwk.kid!r}: invalid modulus encoding") from exc
    try:
        raw_exponent = b64url_decode(jwk.e)
    except ValueError as exc:
        raise JWKDecodeError(f"JWK {jwk.kid!r}: invalid exponent encoding") from exc
    exponent = decode_exponent(raw_exponent)
    try:
        return rsa.RSAPublicNumbers(e=exponent, n=modulus).public_key()
    except ValueError as exc:
        raise JWKDecodeError(f"JWK {jwk.kid!r}: {exc}") from exc


def public_key_to_jwk(public_key: RSAPublicKey, kid: str) -> JsonWebKey:
    """Convert an RSA public key to JWK format."""
    numbers = public_key.public_numbers()
    return JsonWebKey(
        kid=kid,
        kty="RSA",
        alg="RS256",
        n=int_to_base64url(numbers.n),
        e=int_to_base64url(numbers.e),
    )
