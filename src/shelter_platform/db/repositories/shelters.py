"""
shelter_platform.db.repositories.shelters

Repository for `Shelter` entities (the tenant boundary).

Responsibilities:
- Location-filtered listing and keyed lookup (soft-deleted shelters are invisible by default).
- Create/update/soft-delete; memberships live in the assignment store.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import Shelter


class ShelterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_all(
        self,
        *,
        city: str | None = None,
        state: str | None = None,
        country: str | None = None,
        include_deleted: bool = False,
    ) -> list[Shelter]:
        stmt = select(Shelter).order_by(Shelter.id)
        if city:
            stmt = stmt.where(Shelter.city == city)
        if state:
            stmt = stmt.where(Shelter.state == state)
        if country:
            stmt = stmt.where(Shelter.country == country)
        if not include_deleted:
            stmt = stmt.where(Shelter.deleted_at.is_(None))
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, shelter_id: int) -> Shelter | None:
        shelter = await self._session.get(Shelter, shelter_id)
        if shelter is None or shelter.is_deleted:
            return None
        return shelter

    async def create(self, **fields: Any) -> Shelter:
        shelter = Shelter(**fields)
        self._session.add(shelter)
        await self._session.flush()
        return shelter

    async def update(self, shelter_id: int, **fields: Any) -> Shelter | None:
        shelter = await self.get(shelter_id)
        if shelter is None:
            return None
        for key, value in fields.items():
            setattr(shelter, key, value)
        await self._session.flush()
        return shelter

    async def soft_delete(self, shelter_id: int) -> bool:
        shelter = await self.get(shelter_id)
        if shelter is None:
            return False
        shelter.mark_deleted()
        await self._session.flush()
        return True
