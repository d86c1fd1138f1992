"""
shelter_platform.db.repositories.shelter_access_requests

Repository for `ShelterAccessRequest` entities.

Responsibilities:
- Store onboarding requests submitted through the public form.
- Status-filtered listing and status changes for platform operators.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import AccessRequestStatus, ShelterAccessRequest


class ShelterAccessRequestRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_all(self, *, status: AccessRequestStatus | None = None) -> list[ShelterAccessRequest]:
        # Newest first, the order a review queue is read in.
        stmt = select(ShelterAccessRequest).order_by(ShelterAccessRequest.id.desc())
        if status is not None:
            stmt = stmt.where(ShelterAccessRequest.status == status)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, request_id: int) -> ShelterAccessRequest | None:
        return await self._session.get(ShelterAccessRequest, request_id)

    async def create(self, **fields: Any) -> ShelterAccessRequest:
        req = ShelterAccessRequest(status=AccessRequestStatus.pending, **fields)
        self._session.add(req)
        await self._session.flush()
        return req

    async def set_status(
        self, request_id: int, status: AccessRequestStatus
    ) -> ShelterAccessRequest | None:
        req = await self.get(request_id)
        if req is None:
            return None
        req.status = status
        await self._session.flush()
        return req
