"""
shelter_platform.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert the Authorization header into a synced local user (`RequestContext`).
- Resolve the shelter from path/query parameters or nested resources.
- Enforce per-shelter roles via reusable dependency factories.
- Gate platform-level operations on admin membership in the operator shelter.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.api.deps import db_session, identity_verifier_from_app, settings_dep
from shelter_platform.auth.gate import AuthorizationGate
from shelter_platform.auth.identity import IdentityVerifier
from shelter_platform.auth.models import AuthenticatedUser, RequestContext
from shelter_platform.auth.roles import RoleName
from shelter_platform.auth.tenant import TenantResolver
from shelter_platform.db.repositories.assignments import AssignmentRepo
from shelter_platform.errors import Forbidden
from shelter_platform.services.user_directory import UserDirectory
from shelter_platform.settings import Settings

ContextDep = Callable[..., Awaitable[RequestContext]]


async def get_request_context(
    authorization: str | None = Header(default=None),
    verifier: IdentityVerifier = Depends(identity_verifier_from_app),
    session: AsyncSession = Depends(db_session),
) -> RequestContext:
    # Authn: verify the token (or bypass / fail as configured).
    claims = await verifier.authenticate(authorization)

    # Identity sync commits on its own; later stages only read.
    user = await UserDirectory(session).sync_from_identity(claims)
    await session.commit()

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return RequestContext().with_user(AuthenticatedUser.from_user(user))


def get_authorization_gate(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthorizationGate:
    return AuthorizationGate(AssignmentRepo(session), strict_roles=settings.strict_role_ids)


def get_tenant_resolver(session: AsyncSession = Depends(db_session)) -> TenantResolver:
    return TenantResolver(session)


def _allowed(roles: tuple[str, ...]) -> frozenset[RoleName]:
    # Fails at import time on a typo'd role name rather than at request time.
    return frozenset(RoleName(r) for r in roles)


def require_shelter_role(*roles: str, source: str = "path") -> ContextDep:
    """
    Shelter id taken directly from the request: `{shelter_id}` path parameter
    (source="path") or `?shelter_id=` (source="query").
    """

    allowed = _allowed(roles)

    if source == "path":

        async def _from_path(
            shelter_id: int,
            ctx: RequestContext = Depends(get_request_context),
            gate: AuthorizationGate = Depends(get_authorization_gate),
        ) -> RequestContext:
            return await gate.authorize_context(ctx.with_shelter(shelter_id), allowed)

        return _from_path

    if source == "query":

        async def _from_query(
            ctx: RequestContext = Depends(get_request_context),
            gate: AuthorizationGate = Depends(get_authorization_gate),
            shelter_id: int | None = Query(default=None),
        ) -> RequestContext:
            return await gate.authorize_context(ctx.with_shelter(shelter_id), allowed)

        return _from_query

    raise ValueError(f"unsupported shelter id source: {source!r}")


def require_pet_shelter_role(*roles: str) -> ContextDep:
    allowed = _allowed(roles)

    # Authentication resolves first so anonymous callers get 401, never 404.
    async def _dep(
        pet_id: int,
        ctx: RequestContext = Depends(get_request_context),
        tenants: TenantResolver = Depends(get_tenant_resolver),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> RequestContext:
        shelter_id = await tenants.resolve_shelter_for_pet(pet_id)
        return await gate.authorize_context(ctx.with_shelter(shelter_id), allowed)

    return _dep


def require_adoption_request_shelter_role(*roles: str) -> ContextDep:
    allowed = _allowed(roles)

    async def _dep(
        request_id: int,
        ctx: RequestContext = Depends(get_request_context),
        tenants: TenantResolver = Depends(get_tenant_resolver),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> RequestContext:
        shelter_id = await tenants.resolve_shelter_for_adoption_request(request_id)
        return await gate.authorize_context(ctx.with_shelter(shelter_id), allowed)

    return _dep


def require_platform_admin() -> ContextDep:
    """
    Platform-level admin check: the caller must be an admin of the configured
    operator shelter (`SHELTER_OPERATOR_SHELTER_ID`).
    """

    allowed = _allowed((RoleName.admin,))

    async def _dep(
        ctx: RequestContext = Depends(get_request_context),
        gate: AuthorizationGate = Depends(get_authorization_gate),
        settings: Settings = Depends(settings_dep),
    ) -> RequestContext:
        if settings.operator_shelter_id is None:
            raise Forbidden("Platform administration is not enabled")
        return await gate.authorize_context(ctx.with_shelter(settings.operator_shelter_id), allowed)

    return _dep


def require_assignment_shelter_role(*roles: str) -> ContextDep:
    allowed = _allowed(roles)

    async def _dep(
        assignment_id: int,
        ctx: RequestContext = Depends(get_request_context),
        tenants: TenantResolver = Depends(get_tenant_resolver),
        gate: AuthorizationGate = Depends(get_authorization_gate),
    ) -> RequestContext:
        shelter_id = await tenants.resolve_shelter_for_assignment(assignment_id)
        return await gate.authorize_context(ctx.with_shelter(shelter_id), allowed)

    return _dep


# --- Module Notes -----------------------------------------------------------
# Handlers whose shelter id arrives in the JSON body (pet creation, care
# records keyed by pet) take `get_authorization_gate` and call
# `authorize_context` themselves after the body is parsed.
