"""
shelter_platform.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed the fixed role reference rows and the pet attribute lookups.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from shelter_platform.auth.roles import RoleName, role_id_of
from shelter_platform.db.base import Base
from shelter_platform.db.models import (
    ColorLookup,
    PetStatus,
    PetStatusLookup,
    Role,
    SexLookup,
    SizeLookup,
    SpeciesLookup,
)

PET_SPECIES = ("dog", "cat")
PET_SEXES = ("male", "female")
PET_SIZES = ("small", "medium", "large")
PET_COLORS = (
    "black",
    "white",
    "brown",
    "gray",
    "beige",
    "golden",
    "coffee",
    "cream",
    "chocolate",
    "orange",
    "cinnamon",
    "fawn",
)


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist and seed reference data.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        await seed_roles(session)
        await seed_lookups(session)
        await session.commit()


async def seed_roles(session: AsyncSession) -> None:
    # Role ids are part of the authorization contract; insert them explicitly.
    existing = set((await session.execute(select(Role.id))).scalars().all())
    for name in RoleName:
        role_id = role_id_of(name)
        if role_id not in existing:
            session.add(Role(id=role_id, role=name.value))
    await session.flush()


async def seed_lookups(session: AsyncSession) -> None:
    await _seed_values(session, SpeciesLookup.species, PET_SPECIES)
    await _seed_values(session, SexLookup.sex, PET_SEXES)
    # Mirrors the PetStatus enum so the lookup and the column never disagree.
    await _seed_values(session, PetStatusLookup.status, tuple(s.value for s in PetStatus))
    await _seed_values(session, SizeLookup.size, PET_SIZES)
    await _seed_values(session, ColorLookup.color, PET_COLORS)
    await session.flush()


async def _seed_values(
    session: AsyncSession, column: InstrumentedAttribute[str], values: tuple[str, ...]
) -> None:
    model = column.class_
    existing = set((await session.execute(select(column))).scalars().all())
    for value in values:
        if value not in existing:
            session.add(model(**{column.key: value}))


# --- Module Notes -----------------------------------------------------------
# Production deployments create the schema out of band; this helper only runs
# for env=dev/test (see api.app lifespan).
