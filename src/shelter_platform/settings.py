"""
shelter_platform.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Reject configurations that would expose the auth bypass in production.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven settings shared by the API, auth pipeline and persistence layer.

    Identity trust anchors, in order of precedence:
    - `disable_auth`: development bypass, synthesizes a fixed identity.
    - Cognito user pool (`cognito_user_pool_id` + `cognito_client_id`): RS256 ID tokens.
    - `jwt_secret`: HS256 tokens minted locally (dev/test).
    With none of them configured every authenticated request fails with a server error.
    """

    model_config = SettingsConfigDict(env_prefix="SHELTER_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "shelter-platform"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Local trust anchor
    jwt_alg: str = "HS256"
    jwt_issuer: str = "shelter-platform"
    jwt_audience: str = "shelter-api"
    jwt_secret: str | None = Field(default=None, repr=False)

    # Identity provider trust anchor
    cognito_region: str = "us-east-1"
    cognito_user_pool_id: str | None = None
    cognito_client_id: str | None = None
    jwks_timeout_seconds: float = 5.0
    # Minimum gap between key-set refreshes triggered by unknown `kid`s.
    jwks_min_refresh_seconds: float = 30.0

    disable_auth: bool = False
    # Unknown role ids map to "adopter" unless this is set.
    strict_role_ids: bool = False
    # Admins of this shelter act as platform operators (shelter access request review).
    # Unset means no one can review access requests.
    operator_shelter_id: int | None = None

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./shelter.db"
    db_echo: bool = False

    @model_validator(mode="after")
    def _bypass_not_in_prod(self) -> Settings:
        if self.disable_auth and self.env == "prod":
            raise ValueError("disable_auth cannot be enabled when env=prod")
        return self

    @property
    def cognito_configured(self) -> bool:
        return bool(self.cognito_user_pool_id and self.cognito_client_id)

    @property
    def cognito_issuer(self) -> str:
        return f"https://cognito-idp.{self.cognito_region}.amazonaws.com/{self.cognito_user_pool_id}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every module reads configuration through `get_settings()` or an injected
# `Settings` instance; nothing reads os.environ directly.
