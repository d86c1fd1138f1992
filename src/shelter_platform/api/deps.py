"""
shelter_platform.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the objects the app lifespan stores on `app.state` (settings,
  sessionmaker, identity verifier) as dependencies.
- Scope one DB session per request.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shelter_platform.auth.identity import IdentityVerifier
from shelter_platform.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app is built from an explicit Settings instance (see api.app.create_app).
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def identity_verifier_from_app(request: Request) -> IdentityVerifier:
    # Built once per app from settings; tests may swap it on app.state.
    return request.app.state.identity_verifier  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Handlers commit explicitly; a failed request never leaves a half-written
    # transaction behind.
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so the gate, the tenant resolver and
# the handler all see the same session.
