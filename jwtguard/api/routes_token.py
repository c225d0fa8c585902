"""Endpoints exposing the claims of a verified Bearer token."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from jwtguard.api.deps import VerifiedToken, require_jwt
from jwtguard.token.parser import decode_claims_as_map

router = APIRouter(prefix="/token", tags=["token"])

AnyRoleToken = Annotated[VerifiedToken, Depends(require_jwt([]))]
ConfiguredRoleToken = Annotated[VerifiedToken, Depends(require_jwt())]


@router.get("/claims")
async def token_claims(verified: AnyRoleToken) -> dict[str, Any]:
    """GET /token/claims -- every claim of the caller's token."""
    return decode_claims_as_map(verified.token)


@router.get("/roles")
async def token_roles(verified: ConfiguredRoleToken) -> dict[str, Any]:
    """GET /token/roles -- roles of a caller holding the configured role groups."""
    return {
        "email": verified.claims.email,
        "roles": verified.claims.roles,
    }
