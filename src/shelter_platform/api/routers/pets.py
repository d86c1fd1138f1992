"""
shelter_platform.api.routers.pets

Pet endpoints.

Responsibilities:
- Public pet browsing with filters.
- Check species/sex/size/colors against the lookup tables on write.
- Staff-only (admin/member) create and update; admin-only delete and archive.
"""

from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from shelter_platform.api.deps import db_session
from shelter_platform.auth.deps import (
    get_authorization_gate,
    get_request_context,
    require_pet_shelter_role,
)
from shelter_platform.auth.gate import AuthorizationGate
from shelter_platform.auth.models import RequestContext
from shelter_platform.auth.roles import RoleName
from shelter_platform.db.models import ColorLookup, Pet, PetStatus
from shelter_platform.db.repositories.lookups import LookupRepo
from shelter_platform.db.repositories.pets import PetRepo
from shelter_platform.db.repositories.shelters import ShelterRepo
from shelter_platform.errors import NotFound, UnknownReference

router = APIRouter(prefix="/v1/pets", tags=["pets"])

STAFF = (RoleName.admin, RoleName.member)


class PetCreateRequest(BaseModel):
    shelter_id: int
    name: str = Field(min_length=1, max_length=255)
    species: str = Field(min_length=1, max_length=50)
    sex: str = Field(min_length=1, max_length=20)
    size: str = Field(min_length=1, max_length=20)
    status: PetStatus = PetStatus.in_shelter
    birthdate: date | None = None
    breed: str | None = Field(default=None, max_length=255)
    description: str | None = None
    color_ids: list[int] = Field(default_factory=list)


class PetUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    species: str | None = Field(default=None, min_length=1, max_length=50)
    sex: str | None = Field(default=None, min_length=1, max_length=20)
    size: str | None = Field(default=None, min_length=1, max_length=20)
    status: PetStatus | None = None
    birthdate: date | None = None
    breed: str | None = Field(default=None, max_length=255)
    description: str | None = None
    # Replaces the full color set when present.
    color_ids: list[int] | None = None


class ColorResponse(BaseModel):
    id: int
    color: str


class PetResponse(BaseModel):
    id: int
    shelter_id: int
    name: str
    species: str
    sex: str
    size: str
    status: PetStatus
    birthdate: date | None
    breed: str | None
    description: str | None
    colors: list[ColorResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, p: Pet) -> PetResponse:
        return cls(
            id=p.id,
            shelter_id=p.shelter_id,
            name=p.name,
            species=p.species,
            sex=p.sex,
            size=p.size,
            status=p.status,
            birthdate=p.birthdate,
            breed=p.breed,
            description=p.description,
            colors=[ColorResponse(id=c.id, color=c.color) for c in p.colors],
            created_at=p.created_at,
            updated_at=p.updated_at,
        )


async def _check_attributes(
    lookups: LookupRepo,
    *,
    species: str | None = None,
    sex: str | None = None,
    size: str | None = None,
) -> None:
    if species is not None and not await lookups.is_known_species(species):
        raise UnknownReference(f"Unknown species: {species}")
    if sex is not None and not await lookups.is_known_sex(sex):
        raise UnknownReference(f"Unknown sex: {sex}")
    if size is not None and not await lookups.is_known_size(size):
        raise UnknownReference(f"Unknown size: {size}")


async def _resolve_colors(lookups: LookupRepo, color_ids: list[int]) -> list[ColorLookup]:
    colors = await lookups.colors_by_ids(color_ids)
    missing = set(color_ids) - {c.id for c in colors}
    if missing:
        raise UnknownReference(f"Unknown color ids: {', '.join(str(i) for i in sorted(missing))}")
    return colors


@router.get("", response_model=list[PetResponse])
async def list_pets(
    species: str | None = Query(default=None),
    status: PetStatus | None = Query(default=None),
    shelter_id: int | None = Query(default=None),
    size: str | None = Query(default=None),
    color_id: int | None = Query(default=None),
    session: AsyncSession = Depends(db_session),
) -> list[PetResponse]:
    rows = await PetRepo(session).find_all(
        species=species, status=status, shelter_id=shelter_id, size=size, color_id=color_id
    )
    return [PetResponse.from_row(p) for p in rows]


@router.get("/{pet_id}", response_model=PetResponse)
async def get_pet(pet_id: int, session: AsyncSession = Depends(db_session)) -> PetResponse:
    pet = await PetRepo(session).get(pet_id)
    if pet is None:
        raise NotFound("Pet not found")
    return PetResponse.from_row(pet)


@router.post("", response_model=PetResponse, status_code=HTTP_201_CREATED)
async def create_pet(
    body: PetCreateRequest,
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> PetResponse:
    # Shelter id comes from the body, so the gate runs here rather than in a dependency.
    await gate.authorize_context(ctx.with_shelter(body.shelter_id), STAFF)
    if await ShelterRepo(session).get(body.shelter_id) is None:
        raise NotFound("Shelter not found")

    lookups = LookupRepo(session)
    await _check_attributes(lookups, species=body.species, sex=body.sex, size=body.size)
    colors = await _resolve_colors(lookups, body.color_ids)

    pet = await PetRepo(session).create(colors=colors, **body.model_dump(exclude={"color_ids"}))
    await session.commit()
    return PetResponse.from_row(pet)


@router.patch("/{pet_id}", response_model=PetResponse)
async def update_pet(
    pet_id: int,
    body: PetUpdateRequest,
    _: RequestContext = Depends(require_pet_shelter_role(*STAFF)),
    session: AsyncSession = Depends(db_session),
) -> PetResponse:
    # Required columns ignore explicit nulls; nullable ones accept them.
    required = {"name", "species", "sex", "size", "status"}
    fields = {
        k: v
        for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k not in required
    }
    lookups = LookupRepo(session)
    await _check_attributes(
        lookups, species=fields.get("species"), sex=fields.get("sex"), size=fields.get("size")
    )
    color_ids = fields.pop("color_ids", None)
    if color_ids is not None:
        fields["colors"] = await _resolve_colors(lookups, color_ids)
    pet = await PetRepo(session).update(pet_id, **fields)
    if pet is None:
        raise NotFound("Pet not found")
    await session.commit()
    return PetResponse.from_row(pet)


@router.delete("/{pet_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_pet(
    pet_id: int,
    _: RequestContext = Depends(require_pet_shelter_role(RoleName.admin)),
    session: AsyncSession = Depends(db_session),
) -> None:
    if not await PetRepo(session).soft_delete(pet_id):
        raise NotFound("Pet not found")
    await session.commit()


@router.post("/{pet_id}/archive", response_model=PetResponse)
async def archive_pet(
    pet_id: int,
    _: RequestContext = Depends(require_pet_shelter_role(RoleName.admin)),
    session: AsyncSession = Depends(db_session),
) -> PetResponse:
    pet = await PetRepo(session).archive(pet_id)
    if pet is None:
        raise NotFound("Pet not found")
    await session.commit()
    return PetResponse.from_row(pet)
