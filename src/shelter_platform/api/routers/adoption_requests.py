"""
shelter_platform.api.routers.adoption_requests

Adoption request endpoints.

Responsibilities:
- Let any signed-in user file, edit and withdraw their own requests.
- Let staff (admin/member) of the pet's shelter review and process them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from shelter_platform.api.deps import db_session
from shelter_platform.auth.deps import (
    get_authorization_gate,
    get_request_context,
    get_tenant_resolver,
    require_adoption_request_shelter_role,
)
from shelter_platform.auth.gate import AuthorizationGate
from shelter_platform.auth.models import RequestContext
from shelter_platform.auth.roles import RoleName
from shelter_platform.auth.tenant import TenantResolver
from shelter_platform.db.models import AdoptionRequest, AdoptionStatus
from shelter_platform.db.repositories.adoption_requests import AdoptionRequestRepo
from shelter_platform.db.repositories.pets import PetRepo
from shelter_platform.errors import Conflict, Forbidden, NotFound
from shelter_platform.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/v1/adoption-requests", tags=["adoption-requests"])

STAFF = (RoleName.admin, RoleName.member)


class AdoptionRequestCreate(BaseModel):
    pet_id: int
    answers: dict[str, Any] = Field(default_factory=dict)


class AdoptionRequestUpdate(BaseModel):
    answers: dict[str, Any]


class AdoptionRequestProcess(BaseModel):
    status: Literal["approved", "rejected"]
    admin_message: str | None = Field(default=None, max_length=4000)


class AdoptionRequestResponse(BaseModel):
    id: int
    pet_id: int
    user_id: int
    status: AdoptionStatus
    answers: dict[str, Any]
    admin_message: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, r: AdoptionRequest) -> AdoptionRequestResponse:
        return cls(
            id=r.id,
            pet_id=r.pet_id,
            user_id=r.user_id,
            status=r.status,
            answers=r.answers or {},
            admin_message=r.admin_message,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


async def _own_request(
    session: AsyncSession, request_id: int, ctx: RequestContext
) -> AdoptionRequest:
    req = await AdoptionRequestRepo(session).get(request_id)
    if req is None:
        raise NotFound("Adoption request not found")
    if req.user_id != ctx.user_id:
        raise Forbidden("Only the requester can modify this adoption request")
    return req


@router.get("", response_model=list[AdoptionRequestResponse])
async def list_adoption_requests(
    shelter_id: int | None = Query(default=None),
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> list[AdoptionRequestResponse]:
    repo = AdoptionRequestRepo(session)
    if shelter_id is None:
        rows = await repo.find_all(user_id=ctx.user_id)
    else:
        await gate.authorize_context(ctx.with_shelter(shelter_id), STAFF)
        rows = await repo.find_all(shelter_id=shelter_id)
    return [AdoptionRequestResponse.from_row(r) for r in rows]


@router.get("/{request_id}", response_model=AdoptionRequestResponse)
async def get_adoption_request(
    request_id: int,
    ctx: RequestContext = Depends(get_request_context),
    tenants: TenantResolver = Depends(get_tenant_resolver),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> AdoptionRequestResponse:
    req = await AdoptionRequestRepo(session).get(request_id)
    if req is None:
        raise NotFound("Adoption request not found")
    if req.user_id != ctx.user_id:
        shelter_id = await tenants.resolve_shelter_for_pet(req.pet_id)
        await gate.authorize_context(ctx.with_shelter(shelter_id), STAFF)
    return AdoptionRequestResponse.from_row(req)


@router.post("", response_model=AdoptionRequestResponse, status_code=HTTP_201_CREATED)
async def create_adoption_request(
    body: AdoptionRequestCreate,
    ctx: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> AdoptionRequestResponse:
    user_id = ctx.require_user_id()
    if await PetRepo(session).get(body.pet_id) is None:
        raise NotFound("Pet not found")
    req = await AdoptionRequestRepo(session).create(
        pet_id=body.pet_id, user_id=user_id, answers=body.answers
    )
    await session.commit()
    log.info("adoption_request_created", request_id=req.id, pet_id=req.pet_id)
    return AdoptionRequestResponse.from_row(req)


@router.patch("/{request_id}", response_model=AdoptionRequestResponse)
async def update_adoption_request(
    request_id: int,
    body: AdoptionRequestUpdate,
    ctx: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> AdoptionRequestResponse:
    req = await _own_request(session, request_id, ctx)
    if req.status != AdoptionStatus.pending:
        raise Conflict("Adoption request has already been processed")
    updated = await AdoptionRequestRepo(session).update(request_id, answers=body.answers)
    if updated is None:
        raise NotFound("Adoption request not found")
    await session.commit()
    return AdoptionRequestResponse.from_row(updated)


@router.delete("/{request_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_adoption_request(
    request_id: int,
    ctx: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> None:
    await _own_request(session, request_id, ctx)
    await AdoptionRequestRepo(session).delete(request_id)
    await session.commit()


@router.post("/{request_id}/process", response_model=AdoptionRequestResponse)
async def process_adoption_request(
    request_id: int,
    body: AdoptionRequestProcess,
    ctx: RequestContext = Depends(require_adoption_request_shelter_role(*STAFF)),
    session: AsyncSession = Depends(db_session),
) -> AdoptionRequestResponse:
    repo = AdoptionRequestRepo(session)
    req = await repo.get(request_id)
    if req is None:
        raise NotFound("Adoption request not found")
    if req.status != AdoptionStatus.pending:
        raise Conflict("Adoption request has already been processed")

    updated = await repo.update(
        request_id, status=AdoptionStatus(body.status), admin_message=body.admin_message
    )
    if updated is None:
        raise NotFound("Adoption request not found")
    await session.commit()
    log.info(
        "adoption_request_processed",
        request_id=request_id,
        shelter_id=ctx.shelter_id,
        status=body.status,
    )
    return AdoptionRequestResponse.from_row(updated)


# --- Module Notes -----------------------------------------------------------
# Requesters act on their own rows without any shelter role (every signed-in
# user is implicitly an adopter); staff access always goes through the gate
# with the shelter resolved from the pet.
