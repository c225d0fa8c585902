"""Unverified decoding of compact JWT segments.

Nothing here checks a signature. ``decode_claims_as_map`` and
``decode_claims_unverified`` exist for display and debugging; never use
their output to authorize a request.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from jwtguard.core.errors import TokenFormatError
from jwtguard.crypto.keys import b64url_decode
from jwtguard.crypto.types import TokenClaims, TokenHeader

_CLAIMS_MAP = TypeAdapter(dict[str, Any])


def split_token(token: str) -> tuple[str, str, str]:
    """Split a compact JWT into header, claims and signature segments."""
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise TokenFormatError("invalid JWT format")
    header64, claims64, signature64 = parts
    return header64, claims64, signature64


def _decode_segment(segment: str, name: str) -> bytes:
    try:
        return b64url_decode(segment)
    except ValueError as exc:
        raise TokenFormatError(f"invalid JWT {name} encoding") from exc


def decode_header(header64: str) -> TokenHeader:
    """Decode the JOSE header segment."""
    raw = _decode_segment(header64, "header")
    try:
        return TokenHeader.model_validate_json(raw)
    except ValidationError as exc:
        raise TokenFormatError("invalid JWT header format") from exc


def decode_claims(claims64: str) -> TokenClaims:
    """Decode the claims segment into ``TokenClaims``."""
    raw = _decode_segment(claims64, "claims")
    try:
        return TokenClaims.model_validate_json(raw)
    except ValidationError as exc:
        raise TokenFormatError("invalid JWT claims format") from exc


def decode_claims_unverified(token: str) -> TokenClaims:
    """Typed claims of a token without verifying it."""
    _, claims64, _ = split_token(token)
    return decode_claims(claims64)


def decode_claims_as_map(token: str) -> dict[str, Any]:
    """Open claims map of a token without verifying it.

    A numeric ``exp`` is replaced by the UTC datetime it denotes.
    """
    _, claims64, _ = split_token(token)
    raw = _decode_segment(claims64, "claims")
    try:
        claims = _CLAIMS_MAP.validate_json(raw)
    except ValidationError as exc:
        raise TokenFormatError("invalid JWT claims format") from exc
    exp = claims.get("exp")
    if isinstance(exp, int | float) and not isinstance(exp, bool):
        try:
            claims["exp"] = datetime.fromtimestamp(int(exp), UTC)
        except (OverflowError, OSError, ValueError):
            # outside the datetime range, keep the raw number
            pass
    return claims
