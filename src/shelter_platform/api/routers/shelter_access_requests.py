"""
shelter_platform.api.routers.shelter_access_requests

Platform onboarding: organisations ask for a shelter on the platform.

Responsibilities:
- Accept the public access-request form (no authentication).
- Let platform operators list, read and approve/reject requests.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from shelter_platform.api.deps import db_session
from shelter_platform.auth.deps import require_platform_admin
from shelter_platform.auth.models import RequestContext
from shelter_platform.db.models import AccessRequestStatus, ShelterAccessRequest
from shelter_platform.db.repositories.shelter_access_requests import ShelterAccessRequestRepo
from shelter_platform.errors import NotFound
from shelter_platform.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/v1/shelter-access-requests", tags=["shelter-access-requests"])


class AccessRequestCreate(BaseModel):
    shelter_name: str = Field(min_length=1, max_length=255)
    shelter_type: str = Field(min_length=1, max_length=100)
    country: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    city: str = Field(min_length=1, max_length=100)
    contact_name: str = Field(min_length=1, max_length=255)
    contact_email: EmailStr
    contact_phone: str = Field(min_length=1, max_length=50)
    message: str = Field(min_length=1)


class AccessRequestReview(BaseModel):
    status: AccessRequestStatus


class AccessRequestResponse(BaseModel):
    id: int
    shelter_name: str
    shelter_type: str
    country: str
    state: str
    city: str
    contact_name: str
    contact_email: str
    contact_phone: str
    message: str
    status: AccessRequestStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, r: ShelterAccessRequest) -> AccessRequestResponse:
        return cls(
            id=r.id,
            shelter_name=r.shelter_name,
            shelter_type=r.shelter_type,
            country=r.country,
            state=r.state,
            city=r.city,
            contact_name=r.contact_name,
            contact_email=r.contact_email,
            contact_phone=r.contact_phone,
            message=r.message,
            status=r.status,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


@router.post("", response_model=AccessRequestResponse, status_code=HTTP_201_CREATED)
async def submit_access_request(
    body: AccessRequestCreate,
    session: AsyncSession = Depends(db_session),
) -> AccessRequestResponse:
    req = await ShelterAccessRequestRepo(session).create(**body.model_dump())
    await session.commit()
    log.info("shelter_access_request_submitted", request_id=req.id)
    return AccessRequestResponse.from_row(req)


@router.get("", response_model=list[AccessRequestResponse])
async def list_access_requests(
    status: AccessRequestStatus | None = Query(default=None),
    _: RequestContext = Depends(require_platform_admin()),
    session: AsyncSession = Depends(db_session),
) -> list[AccessRequestResponse]:
    rows = await ShelterAccessRequestRepo(session).find_all(status=status)
    return [AccessRequestResponse.from_row(r) for r in rows]


@router.get("/{request_id}", response_model=AccessRequestResponse)
async def get_access_request(
    request_id: int,
    _: RequestContext = Depends(require_platform_admin()),
    session: AsyncSession = Depends(db_session),
) -> AccessRequestResponse:
    req = await ShelterAccessRequestRepo(session).get(request_id)
    if req is None:
        raise NotFound("Shelter access request not found")
    return AccessRequestResponse.from_row(req)


@router.patch("/{request_id}", response_model=AccessRequestResponse)
async def review_access_request(
    request_id: int,
    body: AccessRequestReview,
    ctx: RequestContext = Depends(require_platform_admin()),
    session: AsyncSession = Depends(db_session),
) -> AccessRequestResponse:
    req = await ShelterAccessRequestRepo(session).set_status(request_id, body.status)
    if req is None:
        raise NotFound("Shelter access request not found")
    await session.commit()
    log.info(
        "shelter_access_request_reviewed",
        request_id=request_id,
        status=body.status.value,
        reviewer_id=ctx.user_id,
    )
    return AccessRequestResponse.from_row(req)


# --- Module Notes -----------------------------------------------------------
# Approving a request only records the decision; the operator founds the
# shelter separately (POST /v1/shelters) and invites the contact.
