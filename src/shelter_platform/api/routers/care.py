"""
shelter_platform.api.routers.care

Pet care records: vaccine reference list, vaccinations and events.

Responsibilities:
- Public reads of care history per pet.
- Staff-only (admin/member of the pet's shelter) writes.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from shelter_platform.api.deps import db_session
from shelter_platform.auth.deps import (
    get_authorization_gate,
    get_request_context,
    get_tenant_resolver,
)
from shelter_platform.auth.gate import AuthorizationGate
from shelter_platform.auth.models import RequestContext
from shelter_platform.auth.roles import RoleName
from shelter_platform.auth.tenant import TenantResolver
from shelter_platform.db.models import Event, Vaccination, Vaccine
from shelter_platform.db.repositories.care import EventRepo, VaccinationRepo, VaccineRepo
from shelter_platform.errors import Conflict, NotFound

router = APIRouter(prefix="/v1", tags=["care"])

STAFF = (RoleName.admin, RoleName.member)


class VaccineCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None


class VaccineResponse(BaseModel):
    id: int
    name: str
    description: str | None

    @classmethod
    def from_row(cls, v: Vaccine) -> VaccineResponse:
        return cls(id=v.id, name=v.name, description=v.description)


class VaccinationCreate(BaseModel):
    pet_id: int
    vaccine_id: int


class VaccinationResponse(BaseModel):
    id: int
    pet_id: int
    vaccine_id: int
    created_at: datetime

    @classmethod
    def from_row(cls, v: Vaccination) -> VaccinationResponse:
        return cls(id=v.id, pet_id=v.pet_id, vaccine_id=v.vaccine_id, created_at=v.created_at)


class EventCreate(BaseModel):
    pet_id: int
    name: str = Field(min_length=1, max_length=255)
    date_time: datetime
    description: str | None = None


class EventUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    date_time: datetime | None = None
    description: str | None = None


class EventResponse(BaseModel):
    id: int
    pet_id: int
    name: str
    description: str | None
    date_time: datetime

    @classmethod
    def from_row(cls, e: Event) -> EventResponse:
        return cls(
            id=e.id, pet_id=e.pet_id, name=e.name, description=e.description, date_time=e.date_time
        )


async def _authorize_for_pet(
    pet_id: int,
    ctx: RequestContext,
    tenants: TenantResolver,
    gate: AuthorizationGate,
) -> RequestContext:
    shelter_id = await tenants.resolve_shelter_for_pet(pet_id)
    return await gate.authorize_context(ctx.with_shelter(shelter_id), STAFF)


# Vaccines (reference data)


@router.get("/vaccines", response_model=list[VaccineResponse])
async def list_vaccines(session: AsyncSession = Depends(db_session)) -> list[VaccineResponse]:
    return [VaccineResponse.from_row(v) for v in await VaccineRepo(session).find_all()]


@router.post("/vaccines", response_model=VaccineResponse, status_code=HTTP_201_CREATED)
async def create_vaccine(
    body: VaccineCreate,
    _: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> VaccineResponse:
    repo = VaccineRepo(session)
    if await repo.find_by_name(body.name) is not None:
        raise Conflict("Vaccine already exists")
    vaccine = await repo.create(name=body.name, description=body.description)
    await session.commit()
    return VaccineResponse.from_row(vaccine)


# Vaccinations


@router.get("/vaccinations", response_model=list[VaccinationResponse])
async def list_vaccinations(
    pet_id: int | None = Query(default=None),
    session: AsyncSession = Depends(db_session),
) -> list[VaccinationResponse]:
    rows = await VaccinationRepo(session).find_all(pet_id=pet_id)
    return [VaccinationResponse.from_row(v) for v in rows]


@router.post("/vaccinations", response_model=VaccinationResponse, status_code=HTTP_201_CREATED)
async def create_vaccination(
    body: VaccinationCreate,
    ctx: RequestContext = Depends(get_request_context),
    tenants: TenantResolver = Depends(get_tenant_resolver),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> VaccinationResponse:
    await _authorize_for_pet(body.pet_id, ctx, tenants, gate)
    if await VaccineRepo(session).get(body.vaccine_id) is None:
        raise NotFound("Vaccine not found")
    vaccination = await VaccinationRepo(session).create(
        pet_id=body.pet_id, vaccine_id=body.vaccine_id
    )
    await session.commit()
    return VaccinationResponse.from_row(vaccination)


@router.delete("/vaccinations/{vaccination_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_vaccination(
    vaccination_id: int,
    ctx: RequestContext = Depends(get_request_context),
    tenants: TenantResolver = Depends(get_tenant_resolver),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> None:
    repo = VaccinationRepo(session)
    vaccination = await repo.get(vaccination_id)
    if vaccination is None:
        raise NotFound("Vaccination not found")
    await _authorize_for_pet(vaccination.pet_id, ctx, tenants, gate)
    await repo.soft_delete(vaccination)
    await session.commit()


# Events


@router.get("/events", response_model=list[EventResponse])
async def list_events(
    pet_id: int | None = Query(default=None),
    session: AsyncSession = Depends(db_session),
) -> list[EventResponse]:
    return [EventResponse.from_row(e) for e in await EventRepo(session).find_all(pet_id=pet_id)]


@router.post("/events", response_model=EventResponse, status_code=HTTP_201_CREATED)
async def create_event(
    body: EventCreate,
    ctx: RequestContext = Depends(get_request_context),
    tenants: TenantResolver = Depends(get_tenant_resolver),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> EventResponse:
    await _authorize_for_pet(body.pet_id, ctx, tenants, gate)
    event = await EventRepo(session).create(
        pet_id=body.pet_id,
        name=body.name,
        date_time=body.date_time,
        description=body.description,
    )
    await session.commit()
    return EventResponse.from_row(event)


@router.patch("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    body: EventUpdate,
    ctx: RequestContext = Depends(get_request_context),
    tenants: TenantResolver = Depends(get_tenant_resolver),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> EventResponse:
    repo = EventRepo(session)
    event = await repo.get(event_id)
    if event is None:
        raise NotFound("Event not found")
    await _authorize_for_pet(event.pet_id, ctx, tenants, gate)
    fields = {
        k: v
        for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k == "description"
    }
    event = await repo.update(event, **fields)
    await session.commit()
    return EventResponse.from_row(event)


@router.delete("/events/{event_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    ctx: RequestContext = Depends(get_request_context),
    tenants: TenantResolver = Depends(get_tenant_resolver),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> None:
    repo = EventRepo(session)
    event = await repo.get(event_id)
    if event is None:
        raise NotFound("Event not found")
    await _authorize_for_pet(event.pet_id, ctx, tenants, gate)
    await repo.soft_delete(event)
    await session.commit()
