"""
shelter_platform.api.routers.dev_auth

Local token minting for development.

Responsibilities:
- Issue shared-secret identity tokens so the API can be exercised without the
  identity provider. Hidden (404) in prod or when no shared secret is set.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from shelter_platform.api.deps import settings_dep
from shelter_platform.auth.jwt import JwtConfig, issue_token
from shelter_platform.errors import NotFound
from shelter_platform.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=255)
    email: EmailStr
    name: str | None = Field(default=None, max_length=255)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
) -> DevTokenResponse:
    if settings.env == "prod" or not settings.jwt_secret:
        raise NotFound("Not found")

    cfg = JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )
    token = issue_token(
        cfg=cfg,
        subject=body.subject,
        email=body.email,
        name=body.name,
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    return DevTokenResponse(access_token=token)
