"""Claims policy: issuer, token use, expiry, client id and role groups."""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

from jwtguard.core.errors import ErrorKind, ForbiddenError, UnauthorizedError
from jwtguard.crypto.types import TokenClaims, TokenUse

T = TypeVar("T")


class ClaimsPolicy(BaseModel):
    """What a verified token must assert to be accepted.

    ``role_groups`` is an AND of OR groups: every group needs at least one
    of its roles present in the token.
    """

    model_config = ConfigDict(frozen=True)

    issuer: str
    token_use: str
    client_ids: frozenset[str]
    role_groups: tuple[tuple[str, ...], ...] = ()


def contains_any(values: Iterable[T], query: Sequence[T]) -> T | None:
    """Return the first element of ``query`` found in ``values``."""
    present = set(values)
    for item in query:
        if item in present:
            return item
    return None


def _subject_id(claims: TokenClaims, token_use: str) -> str:
    if token_use == TokenUse.ACCESS:
        return claims.client_id
    if token_use == TokenUse.ID:
        return claims.aud
    raise UnauthorizedError("invalid token use", ErrorKind.TOKEN_USE)


def check_claims(
    claims: TokenClaims,
    policy: ClaimsPolicy,
    now: datetime | None = None,
) -> None:
    """Evaluate decoded claims against a policy; the first failure wins."""
    if claims.iss != policy.issuer:
        raise UnauthorizedError("invalid JWT issuer", ErrorKind.ISSUER)
    if claims.token_use != policy.token_use:
        raise UnauthorizedError("invalid JWT use", ErrorKind.TOKEN_USE)

    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    current = int(now.timestamp())
    if claims.exp < current:
        raise UnauthorizedError("expired JWT", ErrorKind.EXPIRED)

    if _subject_id(claims, policy.token_use) not in policy.client_ids:
        raise UnauthorizedError("invalid client ID", ErrorKind.CLIENT_ID)

    for group in policy.role_groups:
        if contains_any(claims.roles, group) is None:
            raise ForbiddenError(
                f"missing role: at least one of {', '.join(group)} is required"
            )
