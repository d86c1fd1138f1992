"""
shelter_platform.api.app

FastAPI app factory for the shelter platform service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, HTTP client, identity verifier).
- Map the typed failure kinds to HTTP responses.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shelter_platform import __version__
from shelter_platform.api.routers.adoption_requests import router as adoption_requests_router
from shelter_platform.api.routers.assignments import router as assignments_router
from shelter_platform.api.routers.care import router as care_router
from shelter_platform.api.routers.dev_auth import router as dev_auth_router
from shelter_platform.api.routers.health import router as health_router
from shelter_platform.api.routers.lookups import router as lookups_router
from shelter_platform.api.routers.pets import router as pets_router
from shelter_platform.api.routers.shelter_access_requests import router as access_requests_router
from shelter_platform.api.routers.shelters import router as shelters_router
from shelter_platform.api.routers.users import router as users_router
from shelter_platform.auth.identity import build_identity_verifier
from shelter_platform.db.init_db import init_db
from shelter_platform.db.session import create_engine, create_sessionmaker
from shelter_platform.errors import NotConfigured, ShelterPlatformError
from shelter_platform.observability.logging import configure_logging, get_logger
from shelter_platform.observability.middleware import RequestContextMiddleware
from shelter_platform.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        env=settings.env,
        log_format=settings.log_format,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        # One outbound client for the identity provider's JWKS endpoint.
        app.state.http = httpx.AsyncClient()
        app.state.identity_verifier = build_identity_verifier(settings, http=app.state.http)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(engine)
        try:
            yield
        finally:
            await app.state.http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Shelter Platform API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(ShelterPlatformError, _platform_error_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(users_router)
    app.include_router(shelters_router)
    app.include_router(access_requests_router)
    app.include_router(assignments_router)
    app.include_router(pets_router)
    app.include_router(lookups_router)
    app.include_router(adoption_requests_router)
    app.include_router(care_router)

    return app


async def _platform_error_handler(request: Request, exc: ShelterPlatformError) -> JSONResponse:
    if isinstance(exc, NotConfigured):
        # Deployment defect, not a client error.
        log.error("auth_not_configured", detail=exc.message)
    else:
        log.info("request_rejected", code=exc.code, status_code=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# --- Module Notes -----------------------------------------------------------
# App composition stays here; authorization lives in auth/, data access in db/.
