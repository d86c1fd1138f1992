"""
shelter_platform.api.routers.lookups

Public reference data for pet forms and filters.

Responsibilities:
- Serve the species, sex, status, size and color lookup tables as `{id, <value>}` lists.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.api.deps import db_session
from shelter_platform.db.repositories.lookups import LookupRepo

router = APIRouter(prefix="/v1/lookups", tags=["lookups"])


class SpeciesResponse(BaseModel):
    id: int
    species: str


class SexResponse(BaseModel):
    id: int
    sex: str


class PetStatusResponse(BaseModel):
    id: int
    status: str


class SizeResponse(BaseModel):
    id: int
    size: str


class ColorResponse(BaseModel):
    id: int
    color: str


@router.get("/pet-species", response_model=list[SpeciesResponse])
async def pet_species(session: AsyncSession = Depends(db_session)) -> list[SpeciesResponse]:
    return [SpeciesResponse(id=r.id, species=r.species) for r in await LookupRepo(session).species()]


@router.get("/sexes", response_model=list[SexResponse])
async def sexes(session: AsyncSession = Depends(db_session)) -> list[SexResponse]:
    return [SexResponse(id=r.id, sex=r.sex) for r in await LookupRepo(session).sexes()]


@router.get("/pet-statuses", response_model=list[PetStatusResponse])
async def pet_statuses(session: AsyncSession = Depends(db_session)) -> list[PetStatusResponse]:
    rows = await LookupRepo(session).pet_statuses()
    return [PetStatusResponse(id=r.id, status=r.status) for r in rows]


@router.get("/pet-sizes", response_model=list[SizeResponse])
async def pet_sizes(session: AsyncSession = Depends(db_session)) -> list[SizeResponse]:
    return [SizeResponse(id=r.id, size=r.size) for r in await LookupRepo(session).sizes()]


@router.get("/pet-colors", response_model=list[ColorResponse])
async def pet_colors(session: AsyncSession = Depends(db_session)) -> list[ColorResponse]:
    return [ColorResponse(id=r.id, color=r.color) for r in await LookupRepo(session).colors()]
