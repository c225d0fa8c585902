"""Verifier settings loaded from environment variables."""

from collections.abc import Sequence

from pydantic_settings import BaseSettings, SettingsConfigDict

from jwtguard.crypto.types import TokenUse
from jwtguard.http.client import DEFAULT_TIMEOUT
from jwtguard.token.policy import ClaimsPolicy

ROLE_GROUP_SEPARATOR = ";"
ROLE_SEPARATOR = "|"


class GuardSettings(BaseSettings):
    """Token policy and key set source settings."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    issuer: str = "http://localhost:8000"
    jwks_base_url: str = ""
    token_use: str = TokenUse.ACCESS
    client_ids: str = ""
    role_groups: str = ""
    fetch_timeout: float = DEFAULT_TIMEOUT
    http_keep_alive: bool = True
    http_trace: bool = False

    @property
    def key_set_base_url(self) -> str:
        """Base URL serving ``/.well-known/jwks.json``; defaults to the issuer."""
        return (self.jwks_base_url or self.issuer).rstrip("/")

    def get_client_id_set(self) -> frozenset[str]:
        """Parse comma-separated client ids."""
        return frozenset(c.strip() for c in self.client_ids.split(",") if c.strip())

    def get_role_groups(self) -> list[list[str]]:
        """Parse ``admin|owner;billing`` into ``[["admin", "owner"], ["billing"]]``."""
        groups = []
        for chunk in self.role_groups.split(ROLE_GROUP_SEPARATOR):
            roles = [r.strip() for r in chunk.split(ROLE_SEPARATOR) if r.strip()]
            if roles:
                groups.append(roles)
        return groups

    def claims_policy(
        self, role_groups: Sequence[Sequence[str]] | None = None
    ) -> ClaimsPolicy:
        """Build the claims policy, using configured role groups by default."""
        groups = self.get_role_groups() if role_groups is None else role_groups
        return ClaimsPolicy(
            issuer=self.issuer,
            token_use=self.token_use,
            client_ids=self.get_client_id_set(),
            role_groups=tuple(tuple(group) for group in groups),
        )
