"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts, seeds reference data and passes its probes in test mode.
"""

from __future__ import annotations

import httpx
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import Role


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json() == {"status": "ready", "auth": "shared_secret"}
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"


@pytest.mark.asyncio
async def test_roles_are_seeded(session: AsyncSession) -> None:
    rows = (await session.execute(select(Role.id, Role.role).order_by(Role.id))).all()
    assert [tuple(r) for r in rows] == [(1, "admin"), (2, "member"), (3, "adopter")]


@pytest.mark.asyncio
async def test_public_lists_start_empty(client: httpx.AsyncClient) -> None:
    for path in ("/v1/shelters", "/v1/pets", "/v1/vaccines", "/v1/events", "/v1/vaccinations"):
        r = await client.get(path)
        assert r.status_code == 200, path
        assert r.json() == []
