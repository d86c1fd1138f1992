"""
shelter_platform.api.routers.users

User endpoints.

Responsibilities:
- Expose the caller's synced profile and memberships.
- Read other users' public profile by id.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.api.deps import db_session
from shelter_platform.auth.deps import get_request_context
from shelter_platform.auth.models import RequestContext
from shelter_platform.auth.roles import role_name_of
from shelter_platform.db.models import User
from shelter_platform.db.repositories.assignments import AssignmentRepo
from shelter_platform.errors import NotFound
from shelter_platform.services.user_directory import UserDirectory

router = APIRouter(prefix="/v1/users", tags=["users"])


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    country: str | None = None
    state: str | None = None
    city: str | None = None

    @classmethod
    def from_row(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            country=user.country,
            state=user.state,
            city=user.city,
        )


class MembershipResponse(BaseModel):
    assignment_id: int
    shelter_id: int
    role_id: int
    role_name: str


async def _load(session: AsyncSession, user_id: int) -> User:
    user = await UserDirectory(session).get(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("/me", response_model=UserResponse)
async def get_me(
    ctx: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> UserResponse:
    return UserResponse.from_row(await _load(session, ctx.require_user_id()))


@router.get("/me/assignments", response_model=list[MembershipResponse])
async def list_my_assignments(
    ctx: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> list[MembershipResponse]:
    rows = await AssignmentRepo(session).find_all(user_id=ctx.user_id)
    return [
        MembershipResponse(
            assignment_id=a.id,
            shelter_id=a.shelter_id,
            role_id=a.role_id,
            role_name=role_name_of(a.role_id).value,
        )
        for a in rows
    ]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    _: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> UserResponse:
    return UserResponse.from_row(await _load(session, user_id))
