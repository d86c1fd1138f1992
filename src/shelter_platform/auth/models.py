"""
shelter_platform.auth.models

Auth domain models threaded through the request pipeline.

Responsibilities:
- Define the authenticated identity type (`AuthenticatedUser`).
- Define the granted (shelter, role) pair (`GrantedContext`).
- Define the immutable `RequestContext` each pipeline stage returns a new copy of.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from shelter_platform.auth.roles import RoleName
from shelter_platform.db.models import User
from shelter_platform.errors import Unauthenticated


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    id: int
    subject_id: str | None
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> AuthenticatedUser:
        return cls(id=user.id, subject_id=user.subject_id, email=user.email, name=user.name)


@dataclass(frozen=True, slots=True)
class GrantedContext:
    """
    Resolved (shelter, role) pair for an authorized request.

    Informational for handlers (e.g. to scope queries); sensitive operations
    must still go through the gate rather than trust a stale copy.
    """

    shelter_id: int
    role_id: int
    role_name: RoleName


@dataclass(frozen=True, slots=True)
class RequestContext:
    user: AuthenticatedUser | None = None
    shelter_id: int | None = None
    grant: GrantedContext | None = None

    @property
    def user_id(self) -> int | None:
        return self.user.id if self.user is not None else None

    def require_user_id(self) -> int:
        if self.user is None:
            raise Unauthenticated()
        return self.user.id

    def with_user(self, user: AuthenticatedUser) -> RequestContext:
        return replace(self, user=user)

    def with_shelter(self, shelter_id: int | None) -> RequestContext:
        return replace(self, shelter_id=shelter_id)

    def with_grant(self, grant: GrantedContext) -> RequestContext:
        return replace(self, grant=grant)


# --- Module Notes -----------------------------------------------------------
# Stages never mutate a context they receive; see auth.deps for the chaining.
