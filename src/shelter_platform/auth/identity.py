"""
shelter_platform.auth.identity

Identity verification: bearer token -> verified subject and profile claims.

Responsibilities:
- Extract the bearer token from the Authorization header.
- Verify tokens against the configured trust anchor (shared secret or Cognito JWKS).
- Provide the development bypass and the "no trust anchor" verifier.
- Build the single verifier instance the app injects into the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import jwt
from jwt import InvalidTokenError

from shelter_platform.auth.jwks import JwksKeyStore
from shelter_platform.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from shelter_platform.errors import InvalidToken, MissingToken, NotConfigured
from shelter_platform.observability.logging import get_logger
from shelter_platform.settings import Settings

log = get_logger(__name__)

_BEARER_PREFIX = "Bearer "


@dataclass(frozen=True, slots=True)
class IdentityClaims:
    subject_id: str
    email: str
    display_name: str


DEV_IDENTITY = IdentityClaims(
    subject_id="dev-bypass-user",
    email="dev@example.com",
    display_name="Development User",
)


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise MissingToken()
    token = authorization[len(_BEARER_PREFIX) :].strip()
    if not token:
        raise MissingToken()
    return token


def claims_from_payload(payload: dict[str, Any]) -> IdentityClaims:
    subject = str(payload.get("sub") or "")
    email = payload.get("email")
    if not subject:
        raise InvalidToken("Invalid token subject")
    if not isinstance(email, str) or not email:
        raise InvalidToken("Token has no email claim")
    name = payload.get("name")
    return IdentityClaims(
        subject_id=subject,
        email=email,
        display_name=name if isinstance(name, str) and name else email,
    )


class IdentityVerifier:
    """
    Base verifier. Subclasses implement `verify`; `authenticate` is the entry
    point used by the request pipeline.
    """

    async def verify(self, raw_token: str) -> IdentityClaims:
        raise NotImplementedError

    async def authenticate(self, authorization: str | None) -> IdentityClaims:
        return await self.verify(extract_bearer_token(authorization))


class SharedSecretVerifier(IdentityVerifier):
    def __init__(self, cfg: JwtConfig) -> None:
        self._cfg = cfg

    async def verify(self, raw_token: str) -> IdentityClaims:
        try:
            payload = decode_and_validate(cfg=self._cfg, token=raw_token)
        except JwtValidationError as e:
            raise InvalidToken(f"Invalid token: {e}") from e
        return claims_from_payload(payload)


class CognitoVerifier(IdentityVerifier):
    """
    Verifies Cognito ID tokens (RS256) against the user pool JWKS.
    """

    def __init__(self, *, cfg: JwtConfig, keys: JwksKeyStore) -> None:
        self._cfg = cfg
        self._keys = keys

    async def verify(self, raw_token: str) -> IdentityClaims:
        try:
            header = jwt.get_unverified_header(raw_token)
        except InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}") from e
        kid = header.get("kid")
        if not kid:
            raise InvalidToken("Token header has no key id")

        signing_key = await self._keys.signing_key(kid)
        try:
            payload = decode_and_validate(cfg=self._cfg, token=raw_token, key=signing_key.key)
        except JwtValidationError as e:
            raise InvalidToken(f"Invalid token: {e}") from e

        # Access tokens share the signing keys; only ID tokens carry profile claims.
        if payload.get("token_use") != "id":
            raise InvalidToken("Token is not an ID token")
        return claims_from_payload(payload)


class DevelopmentBypassVerifier(IdentityVerifier):
    async def verify(self, raw_token: str) -> IdentityClaims:
        return DEV_IDENTITY

    async def authenticate(self, authorization: str | None) -> IdentityClaims:
        # Bypass wins over every other check, including a missing header.
        return DEV_IDENTITY


class UnconfiguredVerifier(IdentityVerifier):
    async def verify(self, raw_token: str) -> IdentityClaims:
        raise NotConfigured()

    async def authenticate(self, authorization: str | None) -> IdentityClaims:
        raise NotConfigured(
            "Authentication not configured. Set SHELTER_COGNITO_USER_POOL_ID and "
            "SHELTER_COGNITO_CLIENT_ID (or SHELTER_JWT_SECRET for local tokens)."
        )


def build_identity_verifier(settings: Settings, *, http: httpx.AsyncClient) -> IdentityVerifier:
    if settings.disable_auth:
        log.warning("auth_bypass_enabled", env=settings.env)
        return DevelopmentBypassVerifier()

    if settings.cognito_configured:
        issuer = settings.cognito_issuer
        keys = JwksKeyStore(
            url=f"{issuer}/.well-known/jwks.json",
            http=http,
            timeout=settings.jwks_timeout_seconds,
            min_refresh_interval=settings.jwks_min_refresh_seconds,
        )
        cfg = JwtConfig(alg="RS256", issuer=issuer, audience=settings.cognito_client_id or "")
        return CognitoVerifier(cfg=cfg, keys=keys)

    if settings.jwt_secret:
        return SharedSecretVerifier(
            JwtConfig(
                alg=settings.jwt_alg,
                issuer=settings.jwt_issuer,
                audience=settings.jwt_audience,
                secret=settings.jwt_secret,
            )
        )

    log.error("auth_not_configured", env=settings.env)
    return UnconfiguredVerifier()


# --- Module Notes -----------------------------------------------------------
# The verifier is built once in the app lifespan and read from app.state by
# `auth.deps`; tests swap it by assigning a different instance.
