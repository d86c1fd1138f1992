"""
shelter_platform.db.repositories.adoption_requests

Repository for `AdoptionRequest` entities.

Responsibilities:
- Listing by requester, pet, owning shelter (joined through the pet) or status.
- Create pending requests; update and hard-delete them.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import AdoptionRequest, AdoptionStatus, Pet


class AdoptionRequestRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, request_id: int) -> AdoptionRequest | None:
        return await self._session.get(AdoptionRequest, request_id)

    async def find_all(
        self,
        *,
        user_id: int | None = None,
        pet_id: int | None = None,
        shelter_id: int | None = None,
        status: AdoptionStatus | None = None,
    ) -> list[AdoptionRequest]:
        stmt = select(AdoptionRequest).order_by(AdoptionRequest.id)
        if user_id is not None:
            stmt = stmt.where(AdoptionRequest.user_id == user_id)
        if pet_id is not None:
            stmt = stmt.where(AdoptionRequest.pet_id == pet_id)
        if shelter_id is not None:
            stmt = stmt.join(Pet, AdoptionRequest.pet_id == Pet.id).where(
                Pet.shelter_id == shelter_id
            )
        if status is not None:
            stmt = stmt.where(AdoptionRequest.status == status)
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(self, *, pet_id: int, user_id: int, answers: dict[str, Any]) -> AdoptionRequest:
        req = AdoptionRequest(
            pet_id=pet_id,
            user_id=user_id,
            status=AdoptionStatus.pending,
            answers=answers,
            admin_message=None,
        )
        self._session.add(req)
        await self._session.flush()
        return req

    async def update(self, request_id: int, **fields: Any) -> AdoptionRequest | None:
        req = await self.get(request_id)
        if req is None:
            return None
        for key, value in fields.items():
            setattr(req, key, value)
        await self._session.flush()
        return req

    async def delete(self, request_id: int) -> bool:
        req = await self.get(request_id)
        if req is None:
            return False
        await self._session.delete(req)
        await self._session.flush()
        return True
