"""
shelter_platform.db.repositories.pets

Repository for `Pet` entities.

Responsibilities:
- Filtered listing and keyed lookup (soft-deleted pets are invisible by default).
- Create/update/archive/soft-delete; colors are a many-to-many onto the color lookup.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import ColorLookup, Pet, PetStatus


class PetRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_all(
        self,
        *,
        species: str | None = None,
        status: PetStatus | None = None,
        shelter_id: int | None = None,
        size: str | None = None,
        color_id: int | None = None,
        include_deleted: bool = False,
    ) -> list[Pet]:
        stmt = select(Pet).order_by(Pet.id)
        if not include_deleted:
            stmt = stmt.where(Pet.deleted_at.is_(None))
        if species:
            stmt = stmt.where(Pet.species == species)
        if status is not None:
            stmt = stmt.where(Pet.status == status)
        if shelter_id is not None:
            stmt = stmt.where(Pet.shelter_id == shelter_id)
        if size:
            stmt = stmt.where(Pet.size == size)
        if color_id is not None:
            stmt = stmt.where(Pet.colors.any(ColorLookup.id == color_id))
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, pet_id: int) -> Pet | None:
        pet = await self._session.get(Pet, pet_id)
        if pet is None or pet.is_deleted:
            return None
        return pet

    async def create(self, *, colors: list[ColorLookup] | None = None, **fields: Any) -> Pet:
        # Always set the collection so it never needs a lazy load on a fresh row.
        pet = Pet(colors=colors or [], **fields)
        self._session.add(pet)
        await self._session.flush()
        return pet

    async def update(self, pet_id: int, **fields: Any) -> Pet | None:
        pet = await self.get(pet_id)
        if pet is None:
            return None
        for key, value in fields.items():
            setattr(pet, key, value)
        await self._session.flush()
        return pet

    async def archive(self, pet_id: int) -> Pet | None:
        # Archiving marks the pet adopted; it stays visible in listings.
        return await self.update(pet_id, status=PetStatus.adopted)

    async def soft_delete(self, pet_id: int) -> bool:
        pet = await self.get(pet_id)
        if pet is None:
            return False
        pet.mark_deleted()
        await self._session.flush()
        return True
