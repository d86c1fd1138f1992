"""
shelter_platform.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Liveness probe (`/healthz`).
- Readiness probe (`/readyz`): DB connectivity and a usable identity trust anchor.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from shelter_platform.api.deps import db_session, identity_verifier_from_app
from shelter_platform.auth.identity import (
    CognitoVerifier,
    DevelopmentBypassVerifier,
    IdentityVerifier,
    SharedSecretVerifier,
)

router = APIRouter()


def _auth_mode(verifier: IdentityVerifier) -> str:
    if isinstance(verifier, DevelopmentBypassVerifier):
        return "bypass"
    if isinstance(verifier, CognitoVerifier):
        return "cognito"
    if isinstance(verifier, SharedSecretVerifier):
        return "shared_secret"
    return "unconfigured"


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    verifier: IdentityVerifier = Depends(identity_verifier_from_app),
) -> JSONResponse:
    await session.execute(text("SELECT 1"))
    mode = _auth_mode(verifier)
    # Without a trust anchor every authenticated route fails; don't take traffic.
    ready = mode != "unconfigured"
    return JSONResponse(
        status_code=HTTP_200_OK if ready else HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if ready else "not_ready", "auth": mode},
    )
