"""RS256 signature verification."""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, utils
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from jwtguard.core.errors import SignatureError
from jwtguard.crypto.keys import b64url_decode


def signing_input(header64: str, claims64: str) -> bytes:
    """Bytes covered by a JWS signature: the two raw segments joined by a dot."""
    return f"{header64}.{claims64}".encode("ascii")


def sha256_digest(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def verify_rs256(data: bytes, signature64: str, key: RSAPublicKey) -> None:
    """Check an RSASSA-PKCS1-v1_5 SHA-256 signature over ``data``."""
    try:
        signature = b64url_decode(signature64)
    except ValueError as exc:
        raise SignatureError("invalid JWT signature format") from exc
    try:
        key.verify(
            signature,
            sha256_digest(data),
            padding.PKCS1v15(),
            utils.Prehashed(hashes.SHA256()),
        )
    except InvalidSignature as exc:
        raise SignatureError("invalid JWT signature") from exc
