"""
shelter_platform.db.repositories.assignments

Assignment store: the (user, role, shelter) membership table.

Responsibilities:
- Membership lookups for the authorization gate (no caching; every call hits the DB).
- Create/revoke memberships and list shelter members.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import Assignment, Role, User


@dataclass(frozen=True, slots=True)
class ShelterMember:
    user_id: int
    user_name: str
    user_email: str
    role_id: int
    role_name: str
    assignment_id: int


class AssignmentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, *, user_id: int, shelter_id: int) -> list[Assignment]:
        # Ordered by id so "first matching row" means the oldest membership.
        stmt = (
            select(Assignment)
            .where(Assignment.user_id == user_id, Assignment.shelter_id == shelter_id)
            .order_by(Assignment.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def find_all(
        self,
        *,
        user_id: int | None = None,
        role_id: int | None = None,
        shelter_id: int | None = None,
    ) -> list[Assignment]:
        stmt = select(Assignment).order_by(Assignment.id)
        if user_id is not None:
            stmt = stmt.where(Assignment.user_id == user_id)
        if role_id is not None:
            stmt = stmt.where(Assignment.role_id == role_id)
        if shelter_id is not None:
            stmt = stmt.where(Assignment.shelter_id == shelter_id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, assignment_id: int) -> Assignment | None:
        return await self._session.get(Assignment, assignment_id)

    async def create(self, *, user_id: int, role_id: int, shelter_id: int) -> Assignment:
        assignment = Assignment(user_id=user_id, role_id=role_id, shelter_id=shelter_id)
        self._session.add(assignment)
        await self._session.flush()
        return assignment

    async def delete(self, assignment_id: int) -> bool:
        assignment = await self._session.get(Assignment, assignment_id)
        if assignment is None:
            return False
        await self._session.delete(assignment)
        await self._session.flush()
        return True

    async def members(self, shelter_id: int) -> list[ShelterMember]:
        stmt = (
            select(
                User.id,
                User.name,
                User.email,
                Role.id,
                Role.role,
                Assignment.id,
            )
            .join(User, Assignment.user_id == User.id)
            .join(Role, Assignment.role_id == Role.id)
            .where(Assignment.shelter_id == shelter_id)
            .order_by(Assignment.id)
        )
        rows = (await self._session.execute(stmt)).all()
        return [ShelterMember(*row) for row in rows]


# --- Module Notes -----------------------------------------------------------
# The gate only reads `find`; revocation via `delete` takes effect on the very
# next request because nothing caches memberships.
