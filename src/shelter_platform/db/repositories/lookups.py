"""
shelter_platform.db.repositories.lookups

Read-only access to the pet attribute reference tables.

Responsibilities:
- List species, sexes, statuses, sizes and colors in id order.
- Check submitted pet attributes against the reference rows.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import (
    ColorLookup,
    PetStatusLookup,
    SexLookup,
    SizeLookup,
    SpeciesLookup,
)

L = TypeVar("L", SpeciesLookup, SexLookup, PetStatusLookup, SizeLookup, ColorLookup)


class LookupRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def species(self) -> list[SpeciesLookup]:
        return await self._all(SpeciesLookup)

    async def sexes(self) -> list[SexLookup]:
        return await self._all(SexLookup)

    async def pet_statuses(self) -> list[PetStatusLookup]:
        return await self._all(PetStatusLookup)

    async def sizes(self) -> list[SizeLookup]:
        return await self._all(SizeLookup)

    async def colors(self) -> list[ColorLookup]:
        return await self._all(ColorLookup)

    async def is_known_species(self, value: str) -> bool:
        return await self._exists(select(SpeciesLookup.id).where(SpeciesLookup.species == value))

    async def is_known_sex(self, value: str) -> bool:
        return await self._exists(select(SexLookup.id).where(SexLookup.sex == value))

    async def is_known_size(self, value: str) -> bool:
        return await self._exists(select(SizeLookup.id).where(SizeLookup.size == value))

    async def colors_by_ids(self, color_ids: Iterable[int]) -> list[ColorLookup]:
        ids = set(color_ids)
        if not ids:
            return []
        stmt = select(ColorLookup).where(ColorLookup.id.in_(ids)).order_by(ColorLookup.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def _all(self, model: type[L]) -> list[L]:
        stmt = select(model).order_by(model.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def _exists(self, stmt: Select[tuple[int]]) -> bool:
        return (await self._session.execute(stmt.limit(1))).first() is not None
