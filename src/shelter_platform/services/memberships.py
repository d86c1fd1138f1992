"""
shelter_platform.services.memberships

Shelter membership operations.

Responsibilities:
- Invite a user (existing or placeholder) into a shelter with a role.
- Assign an existing user to a shelter by ids.
- Found a shelter with its creator as the first admin.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.auth.roles import RoleName, UnknownRole, role_id_of, role_name_of
from shelter_platform.db.models import Assignment, Shelter
from shelter_platform.db.repositories.assignments import AssignmentRepo, ShelterMember
from shelter_platform.db.repositories.shelters import ShelterRepo
from shelter_platform.errors import Conflict, NotFound, UnknownReference
from shelter_platform.observability.logging import get_logger
from shelter_platform.services.user_directory import UserDirectory

log = get_logger(__name__)


class MembershipService:
    def __init__(self, session: AsyncSession) -> None:
        self._assignments = AssignmentRepo(session)
        self._shelters = ShelterRepo(session)
        self._users = UserDirectory(session)

    async def create_shelter(self, *, founder_id: int, fields: dict[str, Any]) -> Shelter:
        shelter = await self._shelters.create(**fields)
        await self._assignments.create(
            user_id=founder_id, role_id=role_id_of(RoleName.admin), shelter_id=shelter.id
        )
        log.info("shelter_created", shelter_id=shelter.id, founder_id=founder_id)
        return shelter

    async def members(self, shelter_id: int) -> list[ShelterMember]:
        return await self._assignments.members(shelter_id)

    async def assign(self, *, user_id: int, role_id: int, shelter_id: int) -> Assignment:
        """Direct assignment by ids; same membership rules as `invite`."""

        if await self._shelters.get(shelter_id) is None:
            raise NotFound("Shelter not found")
        if await self._users.get(user_id) is None:
            raise NotFound("User not found")
        try:
            role_name_of(role_id, strict=True)
        except UnknownRole as e:
            raise UnknownReference(f"Unknown role id: {role_id}") from e
        if await self._assignments.find(user_id=user_id, shelter_id=shelter_id):
            raise Conflict("User is already a member of this shelter")

        assignment = await self._assignments.create(
            user_id=user_id, role_id=role_id, shelter_id=shelter_id
        )
        log.info("member_assigned", shelter_id=shelter_id, user_id=user_id, role_id=role_id)
        return assignment

    async def invite(self, *, shelter_id: int, email: str, role: RoleName) -> ShelterMember:
        if await self._shelters.get(shelter_id) is None:
            raise NotFound("Shelter not found")

        user = await self._users.find_by_email(email)
        if user is None:
            user = await self._users.create_placeholder(email)
        elif await self._assignments.find(user_id=user.id, shelter_id=shelter_id):
            raise Conflict("User is already a member of this shelter")

        role_id = role_id_of(role)
        assignment: Assignment = await self._assignments.create(
            user_id=user.id, role_id=role_id, shelter_id=shelter_id
        )
        log.info("member_invited", shelter_id=shelter_id, user_id=user.id, role=role.value)
        return ShelterMember(
            user_id=user.id,
            user_name=user.name,
            user_email=user.email,
            role_id=role_id,
            role_name=role.value,
            assignment_id=assignment.id,
        )


# --- Module Notes -----------------------------------------------------------
# Invitation email delivery is out of scope; the placeholder user is linked to
# a real identity on first sign-in by UserDirectory's email fallback.
