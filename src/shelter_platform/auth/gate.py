"""
shelter_platform.auth.gate

Authorization gate: (user, shelter, allowed roles) -> granted context or failure.

Responsibilities:
- Enforce per-shelter role membership before mutating operations.
- Produce a `GrantedContext` for downstream handlers.

Pipeline (linear, no retries):
  Unauthenticated -> ShelterUnresolved -> MembershipUnknown -> Granted | Denied
"""

from __future__ import annotations

from collections.abc import Iterable

from shelter_platform.auth.models import GrantedContext, RequestContext
from shelter_platform.auth.roles import RoleName, UnknownRole, role_name_of
from shelter_platform.db.repositories.assignments import AssignmentRepo
from shelter_platform.errors import Forbidden, MissingShelterId, Unauthenticated
from shelter_platform.observability.logging import get_logger

log = get_logger(__name__)


class AuthorizationGate:
    def __init__(self, assignments: AssignmentRepo, *, strict_roles: bool = False) -> None:
        self._assignments = assignments
        self._strict_roles = strict_roles

    async def authorize(
        self,
        user_id: int | None,
        shelter_id: int | None,
        allowed_roles: Iterable[RoleName | str],
    ) -> GrantedContext:
        allowed = frozenset(RoleName(r) for r in allowed_roles)

        if user_id is None:
            raise Unauthenticated()
        # Ids are positive; 0 is as good as missing.
        if not shelter_id:
            raise MissingShelterId()

        # Re-read on every call so revocations apply immediately.
        assignments = await self._assignments.find(user_id=user_id, shelter_id=shelter_id)
        if not assignments:
            log.info("authorization_denied", reason="no_membership", shelter_id=shelter_id)
            raise Forbidden("You do not have access to this shelter")

        # Several rows are possible; the oldest one decides.
        role_id = assignments[0].role_id
        try:
            role_name = role_name_of(role_id, strict=self._strict_roles)
        except UnknownRole as e:
            log.warning("authorization_unknown_role", role_id=role_id, shelter_id=shelter_id)
            raise Forbidden("Assigned role is not recognized") from e

        if role_name not in allowed:
            log.info(
                "authorization_denied",
                reason="insufficient_role",
                shelter_id=shelter_id,
                role=role_name.value,
            )
            required = ", ".join(sorted(r.value for r in allowed))
            raise Forbidden(f"Insufficient permissions. Required roles: {required}")

        return GrantedContext(shelter_id=shelter_id, role_id=role_id, role_name=role_name)

    async def authorize_context(
        self,
        ctx: RequestContext,
        allowed_roles: Iterable[RoleName | str],
    ) -> RequestContext:
        grant = await self.authorize(ctx.user_id, ctx.shelter_id, allowed_roles)
        return ctx.with_grant(grant)


# --- Module Notes -----------------------------------------------------------
# The gate is constructed per request around the request's DB session (see
# auth.deps.get_authorization_gate); it holds no state of its own.
