"""
shelter_platform.api.routers.assignments

Membership (assignment) administration.

Responsibilities:
- List and read a shelter's raw assignments for its admins.
- Assign an existing user to a shelter by ids (admins of that shelter).
- Revoke an assignment; takes effect on the next request.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from shelter_platform.api.deps import db_session
from shelter_platform.auth.deps import (
    get_authorization_gate,
    get_request_context,
    require_assignment_shelter_role,
    require_shelter_role,
)
from shelter_platform.auth.gate import AuthorizationGate
from shelter_platform.auth.models import RequestContext
from shelter_platform.auth.roles import RoleName, role_name_of
from shelter_platform.db.models import Assignment
from shelter_platform.db.repositories.assignments import AssignmentRepo
from shelter_platform.errors import NotFound
from shelter_platform.observability.logging import get_logger
from shelter_platform.services.memberships import MembershipService

log = get_logger(__name__)

router = APIRouter(prefix="/v1/assignments", tags=["assignments"])


class AssignmentCreateRequest(BaseModel):
    user_id: int = Field(gt=0)
    role_id: int = Field(gt=0)
    shelter_id: int = Field(gt=0)


class AssignmentResponse(BaseModel):
    id: int
    user_id: int
    role_id: int
    role_name: str
    shelter_id: int

    @classmethod
    def from_row(cls, a: Assignment) -> AssignmentResponse:
        return cls(
            id=a.id,
            user_id=a.user_id,
            role_id=a.role_id,
            role_name=role_name_of(a.role_id).value,
            shelter_id=a.shelter_id,
        )


@router.get("", response_model=list[AssignmentResponse])
async def list_assignments(
    ctx: RequestContext = Depends(require_shelter_role(RoleName.admin, source="query")),
    session: AsyncSession = Depends(db_session),
) -> list[AssignmentResponse]:
    rows = await AssignmentRepo(session).find_all(shelter_id=ctx.shelter_id)
    return [AssignmentResponse.from_row(a) for a in rows]


@router.get("/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    assignment_id: int,
    _: RequestContext = Depends(require_assignment_shelter_role(RoleName.admin)),
    session: AsyncSession = Depends(db_session),
) -> AssignmentResponse:
    assignment = await AssignmentRepo(session).get(assignment_id)
    if assignment is None:
        raise NotFound("Assignment not found")
    return AssignmentResponse.from_row(assignment)


@router.post("", response_model=AssignmentResponse, status_code=HTTP_201_CREATED)
async def create_assignment(
    body: AssignmentCreateRequest,
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    session: AsyncSession = Depends(db_session),
) -> AssignmentResponse:
    # Shelter id comes from the body, so the gate runs here rather than in a dependency.
    await gate.authorize_context(ctx.with_shelter(body.shelter_id), (RoleName.admin,))
    assignment = await MembershipService(session).assign(
        user_id=body.user_id, role_id=body.role_id, shelter_id=body.shelter_id
    )
    await session.commit()
    return AssignmentResponse.from_row(assignment)


@router.delete("/{assignment_id}", status_code=HTTP_204_NO_CONTENT)
async def revoke_assignment(
    assignment_id: int,
    ctx: RequestContext = Depends(require_assignment_shelter_role(RoleName.admin)),
    session: AsyncSession = Depends(db_session),
) -> None:
    if not await AssignmentRepo(session).delete(assignment_id):
        raise NotFound("Assignment not found")
    await session.commit()
    log.info("assignment_revoked", assignment_id=assignment_id, shelter_id=ctx.shelter_id)
