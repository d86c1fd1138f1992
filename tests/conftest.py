"""
tests.conftest

Shared fixtures: an app bound to a throwaway SQLite file, an in-process HTTP
client, a DB session and a token helper.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.api.app import create_app
from shelter_platform.auth.jwt import JwtConfig, issue_token
from shelter_platform.settings import Settings

TEST_SECRET = "test-shared-secret-0123456789abcdef"

AuthHeaders = Callable[..., dict[str, str]]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        jwt_secret=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'shelter.db'}",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan events; drive them explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def session(app: FastAPI) -> AsyncIterator[AsyncSession]:
    async with app.state.sessionmaker() as s:
        yield s


@pytest.fixture
def jwt_cfg(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


@pytest.fixture
def auth(jwt_cfg: JwtConfig) -> AuthHeaders:
    def _headers(subject: str, email: str | None = None, name: str | None = None) -> dict[str, str]:
        token = issue_token(
            cfg=jwt_cfg,
            subject=subject,
            email=email or f"{subject}@example.com",
            name=name,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
