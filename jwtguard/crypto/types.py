"""Type definitions for JWKS documents and RS256 JWT segments."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class TokenUse(StrEnum):
    """Values of the ``token_use`` claim."""

    ACCESS = "access"
    ID = "id"


class JsonWebKey(BaseModel):
    """Single JWK entry in a JWKS response."""

    kid: str = ""
    kty: str = ""
    alg: str = ""
    n: str = ""
    e: str = ""


class JWKSDocument(BaseModel):
    """JSON Web Key Set response."""

    keys: list[JsonWebKey] = Field(default_factory=list)


class TokenHeader(BaseModel):
    """Decoded JOSE header of a JWT."""

    alg: str = ""
    typ: str = ""
    kid: str = ""


class TokenClaims(BaseModel):
    """Decoded JWT claims shared by access and id tokens.

    Access tokens identify the caller through ``client_id``, id tokens
    through ``aud``; ``token_use`` says which one applies.
    """

    model_config = ConfigDict(extra="allow")

    iss: str = ""
    token_use: str = ""
    exp: StrictInt = 0
    client_id: str = ""
    roles: list[str] = Field(default_factory=list, validation_alias="cognito:groups")
    aud: str = ""
    email: str = ""
