"""
shelter_platform.api.routers.shelters

Shelter endpoints (the tenant boundary itself).

Responsibilities:
- Public listing/lookup of shelters.
- Founding a shelter (creator becomes its first admin).
- Admin-only updates, soft deletion and member invitations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from shelter_platform.api.deps import db_session
from shelter_platform.auth.deps import get_request_context, require_shelter_role
from shelter_platform.auth.models import RequestContext
from shelter_platform.auth.roles import RoleName
from shelter_platform.db.models import Shelter
from shelter_platform.db.repositories.assignments import ShelterMember
from shelter_platform.db.repositories.shelters import ShelterRepo
from shelter_platform.errors import NotFound
from shelter_platform.services.memberships import MembershipService

router = APIRouter(prefix="/v1/shelters", tags=["shelters"])


class ShelterFields(BaseModel):
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    zip: int | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class ShelterCreateRequest(ShelterFields):
    name: str = Field(min_length=1, max_length=255)


class ShelterUpdateRequest(ShelterFields):
    name: str | None = Field(default=None, min_length=1, max_length=255)


class ShelterResponse(ShelterFields):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @classmethod
    def from_row(cls, s: Shelter) -> ShelterResponse:
        return cls(
            id=s.id,
            name=s.name,
            address=s.address,
            city=s.city,
            state=s.state,
            country=s.country,
            zip=s.zip,
            latitude=s.latitude,
            longitude=s.longitude,
            created_at=s.created_at,
            updated_at=s.updated_at,
            deleted_at=s.deleted_at,
        )


class MemberResponse(BaseModel):
    user_id: int
    user_name: str
    user_email: str
    role_id: int
    role_name: str
    assignment_id: int

    @classmethod
    def from_member(cls, m: ShelterMember) -> MemberResponse:
        return cls(
            user_id=m.user_id,
            user_name=m.user_name,
            user_email=m.user_email,
            role_id=m.role_id,
            role_name=m.role_name,
            assignment_id=m.assignment_id,
        )


class InviteRequest(BaseModel):
    email: EmailStr
    # Adopters are never invited; they are implicit for any signed-in user.
    role: Literal["admin", "member"]


@router.get("", response_model=list[ShelterResponse])
async def list_shelters(
    city: str | None = Query(default=None),
    state: str | None = Query(default=None),
    country: str | None = Query(default=None),
    include_deleted: bool = Query(default=False),
    session: AsyncSession = Depends(db_session),
) -> list[ShelterResponse]:
    rows = await ShelterRepo(session).find_all(
        city=city, state=state, country=country, include_deleted=include_deleted
    )
    return [ShelterResponse.from_row(s) for s in rows]


@router.get("/{shelter_id}", response_model=ShelterResponse)
async def get_shelter(
    shelter_id: int,
    session: AsyncSession = Depends(db_session),
) -> ShelterResponse:
    shelter = await ShelterRepo(session).get(shelter_id)
    if shelter is None:
        raise NotFound("Shelter not found")
    return ShelterResponse.from_row(shelter)


@router.post("", response_model=ShelterResponse, status_code=HTTP_201_CREATED)
async def create_shelter(
    body: ShelterCreateRequest,
    ctx: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> ShelterResponse:
    shelter = await MembershipService(session).create_shelter(
        founder_id=ctx.require_user_id(), fields=body.model_dump()
    )
    await session.commit()
    return ShelterResponse.from_row(shelter)


@router.patch("/{shelter_id}", response_model=ShelterResponse)
async def update_shelter(
    shelter_id: int,
    body: ShelterUpdateRequest,
    _: RequestContext = Depends(require_shelter_role(RoleName.admin)),
    session: AsyncSession = Depends(db_session),
) -> ShelterResponse:
    fields = body.model_dump(exclude_unset=True)
    if fields.get("name") is None:
        # Name is required on the row; an explicit null means "leave as is".
        fields.pop("name", None)
    shelter = await ShelterRepo(session).update(shelter_id, **fields)
    if shelter is None:
        raise NotFound("Shelter not found")
    await session.commit()
    return ShelterResponse.from_row(shelter)


@router.delete("/{shelter_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_shelter(
    shelter_id: int,
    _: RequestContext = Depends(require_shelter_role(RoleName.admin)),
    session: AsyncSession = Depends(db_session),
) -> None:
    if not await ShelterRepo(session).soft_delete(shelter_id):
        raise NotFound("Shelter not found")
    await session.commit()


@router.get("/{shelter_id}/members", response_model=list[MemberResponse])
async def list_members(
    shelter_id: int,
    _: RequestContext = Depends(require_shelter_role(RoleName.admin, RoleName.member)),
    session: AsyncSession = Depends(db_session),
) -> list[MemberResponse]:
    members = await MembershipService(session).members(shelter_id)
    return [MemberResponse.from_member(m) for m in members]


@router.post("/{shelter_id}/invite", response_model=MemberResponse, status_code=HTTP_201_CREATED)
async def invite_member(
    shelter_id: int,
    body: InviteRequest,
    _: RequestContext = Depends(require_shelter_role(RoleName.admin)),
    session: AsyncSession = Depends(db_session),
) -> MemberResponse:
    member = await MembershipService(session).invite(
        shelter_id=shelter_id, email=body.email, role=RoleName(body.role)
    )
    await session.commit()
    return MemberResponse.from_member(member)
