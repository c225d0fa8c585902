"""Error taxonomy for JWT verification.

Every failure of the verification path surfaces as a ``VerificationError``
carrying an HTTP-style status code and a machine readable ``ErrorKind``.
Stage-level errors raised by the parser, key codec, signature verifier and
key-set cache are wrapped into one of the two public classes by the
orchestrator.
"""

from enum import StrEnum

HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403


class ErrorKind(StrEnum):
    """Why a token was rejected."""

    MISSING_TOKEN = "missing_token"
    MALFORMED = "malformed"
    ALGORITHM = "algorithm"
    KEY_FETCH = "key_fetch"
    KEY_NOT_FOUND = "key_not_found"
    SIGNATURE = "signature"
    ISSUER = "issuer"
    TOKEN_USE = "token_use"
    EXPIRED = "expired"
    CLIENT_ID = "client_id"
    ROLE = "role"


class VerificationError(Exception):
    """Base class for a rejected token."""

    status_code = HTTP_UNAUTHORIZED

    def __init__(self, reason: str, kind: ErrorKind) -> None:
        super().__init__(reason)
        self.reason = reason
        self.kind = kind


class UnauthorizedError(VerificationError):
    """Token is not authentic or not meant for this caller (401)."""

    status_code = HTTP_UNAUTHORIZED


class ForbiddenError(VerificationError):
    """Token is authentic but lacks a required role (403)."""

    status_code = HTTP_FORBIDDEN

    def __init__(self, reason: str, kind: ErrorKind = ErrorKind.ROLE) -> None:
        super().__init__(reason, kind)


class JWKDecodeError(ValueError):
    """A JSON Web Key cannot be turned into an RSA public key."""


class TokenFormatError(ValueError):
    """A token segment is not valid base64url or JSON."""


class SignatureError(Exception):
    """An RS256 signature is malformed or does not match."""


class KeySetFetchError(Exception):
    """The key set could not be fetched or contained no usable key."""
