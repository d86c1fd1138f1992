"""
shelter_platform.auth.tenant

Tenant context resolution: resource id -> owning shelter id.

Responsibilities:
- Walk pet and adoption-request edges back to the shelter that owns them.
- Treat soft-deleted pets and shelters as missing hops.
- Fail fast with `NotFound` on any missing hop; never return partial results.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.repositories.adoption_requests import AdoptionRequestRepo
from shelter_platform.db.repositories.assignments import AssignmentRepo
from shelter_platform.db.repositories.pets import PetRepo
from shelter_platform.db.repositories.shelters import ShelterRepo
from shelter_platform.errors import NotFound


class TenantResolver:
    """
    Read-only: the resolver never writes. Callers attach the result to their
    `RequestContext` via `with_shelter`.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._pets = PetRepo(session)
        self._shelters = ShelterRepo(session)
        self._adoption_requests = AdoptionRequestRepo(session)
        self._assignments = AssignmentRepo(session)

    async def resolve_shelter_for_pet(self, pet_id: int) -> int:
        # Soft-deleted pets and pets of soft-deleted shelters count as missing.
        pet = await self._pets.get(pet_id)
        if pet is None:
            raise NotFound("Pet not found")
        if await self._shelters.get(pet.shelter_id) is None:
            raise NotFound("Shelter not found")
        return pet.shelter_id

    async def resolve_shelter_for_adoption_request(self, request_id: int) -> int:
        req = await self._adoption_requests.get(request_id)
        if req is None:
            raise NotFound("Adoption request not found")
        return await self.resolve_shelter_for_pet(req.pet_id)

    async def resolve_shelter_for_assignment(self, assignment_id: int) -> int:
        assignment = await self._assignments.get(assignment_id)
        if assignment is None:
            raise NotFound("Assignment not found")
        return assignment.shelter_id
